from typing import List

from pydantic import BaseModel, Field


class UserContext(BaseModel):
    """Background the assistant may use; never grounds for a diagnosis."""

    conditions: List[str] = Field(default_factory=list)
    goals: List[str] = Field(default_factory=list)

    @property
    def effective_conditions(self) -> List[str]:
        return [c for c in self.conditions if c.strip() and c.strip().lower() != "none"]

    @property
    def effective_goals(self) -> List[str]:
        return [g for g in self.goals if g.strip() and g.strip().lower() != "none"]

    @property
    def is_empty(self) -> bool:
        return not (self.effective_conditions or self.effective_goals)


class UserProfile(BaseModel):
    """Answers collected by the onboarding questionnaire."""

    full_name: str = ""
    age_group: str = ""
    gender: str = ""
    height: str = ""
    weight: str = ""
    activity_level: str = ""
    diet: str = ""
    water_intake: str = ""
    smoke: str = ""
    alcohol: str = ""
    sleep_hours: str = ""
    conditions: List[str] = Field(default_factory=list)
    medications: str = ""
    family_history: List[str] = Field(default_factory=list)
    checkup_frequency: str = ""
    goals: List[str] = Field(default_factory=list)
    consent: bool = False

    def to_context(self) -> UserContext:
        return UserContext(conditions=list(self.conditions), goals=list(self.goals))
