from abc import ABC, abstractmethod

from healthnav.domain.schemas.input_data import InputData
from healthnav.domain.schemas.result_data import ResultData


class Pipeline_interface(ABC):
    @abstractmethod
    def run(self, input_data: InputData) -> ResultData:
        pass
