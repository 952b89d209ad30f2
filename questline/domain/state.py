"""Game state snapshot passed into and returned from every engine reducer."""

from typing import Annotated, Literal

from pydantic import BaseModel, Field

from questline.domain.quest import MainQuest
from questline.domain.task import Task
from questline.domain.user import UserProfile


class NoPendingBonus(BaseModel):
    """No quest bonus is awaiting confirmation."""

    kind: Literal["none"] = "none"


class PendingQuestBonus(BaseModel):
    """Quest bonus earned by a completion toggle, awaiting explicit confirmation."""

    kind: Literal["pending"] = "pending"
    quest_id: str = Field(..., description="Quest whose bonus is pending")
    quest_title: str = Field(default="", description="Quest title for the confirmation prompt")
    amount: int = Field(..., ge=0, description="Bonus XP that confirmation will apply")
    triggering_task_id: str = Field(..., description="Quest task whose toggle completed the quest")


PendingBonus = Annotated[NoPendingBonus | PendingQuestBonus, Field(discriminator="kind")]


class GameState(BaseModel):
    """One user's full progression state."""

    profile: UserProfile = Field(default_factory=UserProfile)
    tasks: list[Task] = Field(default_factory=list)
    quests: list[MainQuest] = Field(default_factory=list)
    pending_bonus: PendingBonus = Field(default_factory=NoPendingBonus)

    def find_quest(self, quest_id: str) -> MainQuest | None:
        return next((q for q in self.quests if q.id == quest_id), None)

    def find_task(self, task_id: str) -> Task | None:
        return next((t for t in self.tasks if t.id == task_id), None)

    def pending_for(self, quest_id: str) -> PendingQuestBonus | None:
        """Return the pending bonus if it belongs to the given quest."""
        if isinstance(self.pending_bonus, PendingQuestBonus) and self.pending_bonus.quest_id == quest_id:
            return self.pending_bonus
        return None
