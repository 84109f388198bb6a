from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple


def _str_list(value) -> Tuple[str, ...]:
    if not value:
        return ()
    if isinstance(value, str):
        return (value,)
    return tuple(str(item) for item in value)


@dataclass(frozen=True)
class Medicine:
    id: int
    name: str
    uses: Tuple[str, ...] = ()
    side_effects: Tuple[str, ...] = ()
    substitutes: Tuple[str, ...] = ()
    chemical_class: str = ""
    habit_forming: str = ""
    therapeutic_class: str = ""
    action_class: str = ""

    @classmethod
    def from_dict(cls, data: Dict) -> "Medicine":
        return cls(
            id=int(data["id"]),
            name=str(data.get("name", "")),
            uses=_str_list(data.get("uses")),
            side_effects=_str_list(data.get("sideEffects")),
            substitutes=_str_list(data.get("substitutes")),
            chemical_class=str(data.get("Chemical Class", "") or ""),
            habit_forming=str(data.get("Habit Forming", "") or ""),
            therapeutic_class=str(data.get("Therapeutic Class", "") or ""),
            action_class=str(data.get("Action Class", "") or ""),
        )

    def to_dict(self) -> Dict:
        return {
            "id": self.id,
            "name": self.name,
            "uses": list(self.uses),
            "sideEffects": list(self.side_effects),
            "substitutes": list(self.substitutes),
            "Chemical Class": self.chemical_class,
            "Habit Forming": self.habit_forming,
            "Therapeutic Class": self.therapeutic_class,
            "Action Class": self.action_class,
        }


@dataclass
class Reminder:
    id: int
    medicine_name: str
    time: str
    medicine_id: Optional[int] = None
    last_triggered: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Dict) -> "Reminder":
        medicine_id = data.get("medicineId")
        return cls(
            id=int(data["id"]),
            medicine_name=str(data.get("medicineName", "")),
            time=str(data.get("time", "")),
            medicine_id=int(medicine_id) if medicine_id is not None else None,
            last_triggered=data.get("lastTriggered"),
        )

    def to_dict(self) -> Dict:
        data = {
            "id": self.id,
            "medicineName": self.medicine_name,
            "time": self.time,
        }
        if self.medicine_id is not None:
            data["medicineId"] = self.medicine_id
        if self.last_triggered is not None:
            data["lastTriggered"] = self.last_triggered
        return data


@dataclass
class SearchState:
    """Snapshot of one incremental search view."""
    term: str = ""
    results: List[Medicine] = field(default_factory=list)
    search_initiated: bool = False
