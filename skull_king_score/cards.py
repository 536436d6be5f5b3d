# skull_king_score/cards.py
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, List, Union
import enum


class CardGroup(enum.Enum):
    BASE = "Base"
    EXTENSION = "Extension"


@dataclass(frozen=True)
class BonusCard:
    """
    A special card whose bonus can be added to a player's round.

    `value` is signed and editable by the table (house rules); `group` is a
    CardGroup for the stock catalog, or the raw tag of a custom card.
    """
    id: str
    label: str
    description: str
    value: int
    group: Union[CardGroup, str] = CardGroup.BASE

    def __str__(self) -> str:
        sign = "+" if self.value >= 0 else ""
        return f"{self.label} ({group_name(self.group)} · {sign}{self.value} pts)"


def group_name(group: Union[CardGroup, str]) -> str:
    return group.value if isinstance(group, CardGroup) else str(group)


def parse_group(raw: Any) -> Union[CardGroup, str]:
    try:
        return CardGroup(raw)
    except ValueError:
        return str(raw)


def default_cards() -> List[BonusCard]:
    """The stock catalog: base game specials plus the expansion cards."""
    return [
        BonusCard(
            "pirate",
            "Pirate capturé",
            "Bonus pour chaque pirate gagné",
            20,
            CardGroup.BASE,
        ),
        BonusCard(
            "mermaid",
            "Sirène victorieuse",
            "Bonus si la sirène bat le Skull King",
            50,
            CardGroup.BASE,
        ),
        BonusCard(
            "skull-king",
            "Skull King capturé",
            "Bonus par Skull King gagné",
            30,
            CardGroup.BASE,
        ),
        BonusCard(
            "tigress-pirate",
            "Tigresse (mode pirate)",
            "Bonus si la Tigresse est jouée comme pirate",
            20,
            CardGroup.BASE,
        ),
        BonusCard(
            "tigress-escape",
            "Tigresse (mode fuite)",
            "Petit bonus si la Tigresse est jouée en fuite",
            10,
            CardGroup.BASE,
        ),
        BonusCard(
            "kraken",
            "Kraken",
            "Carte d'extension: annule la levée, ajustez selon vos règles.",
            0,
            CardGroup.EXTENSION,
        ),
        BonusCard(
            "whale",
            "Baleine",
            "Carte d'extension: bonus selon vos variantes.",
            10,
            CardGroup.EXTENSION,
        ),
        BonusCard(
            "white-whale",
            "Baleine blanche",
            "Carte d'extension: effets spéciaux, bonus personnalisable.",
            20,
            CardGroup.EXTENSION,
        ),
        BonusCard(
            "loot",
            "Butin",
            "Carte d'extension: ajoutez un bonus maison.",
            10,
            CardGroup.EXTENSION,
        ),
    ]


def card_to_dict(card: BonusCard) -> Dict[str, Any]:
    """Convert a BonusCard to a JSON-serializable dict."""
    return {
        "id": card.id,
        "label": card.label,
        "description": card.description,
        "value": card.value,
        "group": group_name(card.group),
    }


def dict_to_card(data: Dict[str, Any]) -> BonusCard:
    """Convert a dict back into a BonusCard (no coercion; see snapshot)."""
    return BonusCard(
        id=str(data["id"]),
        label=str(data["label"]),
        description=str(data.get("description", "")),
        value=int(data["value"]),
        group=parse_group(data.get("group", CardGroup.BASE.value)),
    )
