from dataclasses import dataclass, field
from typing import Any

CARD_BACK_URL = "/assets/Magic_card_back.webp"

# Type-line keywords that make a card attachable to another permanent
ATTACHMENT_TYPES = ("equipment", "aura", "fortification")


@dataclass(frozen=True, slots=True)
class Card:
    """
    An immutable card definition from the card catalog.

    Card instances on the table reference a Card; the engine never
    mutates or copies-and-edits one.

    Attributes:
        id: Catalog identifier (Scryfall card id)
        name: Card name exactly as printed
        type_line: Full type line (e.g., "Legendary Creature — Phyrexian Angel")
        mana_cost: Mana cost in brace notation (e.g., "{G}{W}{U}{B}")
        oracle_text: Rules text
        image_uris: Image URLs by size (small, normal, large, png, art_crop)
        face_image_uris: Per-face image URLs for double-faced cards
        rarity: common, uncommon, rare, mythic
        set_code: Set code (e.g., "c16")
        set_name: Set name
        produced_mana: Colors this card can produce (mana rock detection)
    """

    id: str
    name: str
    type_line: str = ""
    mana_cost: str | None = None
    oracle_text: str | None = None
    image_uris: dict[str, str] | None = None
    face_image_uris: tuple[dict[str, str], ...] = field(default_factory=tuple)
    rarity: str | None = None
    set_code: str | None = None
    set_name: str | None = None
    produced_mana: tuple[str, ...] = field(default_factory=tuple)

    @classmethod
    def from_scryfall(cls, data: dict[str, Any]) -> "Card":
        """Build a Card from a Scryfall card object."""
        faces = data.get("card_faces") or []
        type_line = data.get("type_line")
        if type_line is None and faces:
            type_line = " // ".join(face.get("type_line", "") for face in faces)

        return cls(
            id=str(data["id"]),
            name=data["name"],
            type_line=type_line or "",
            mana_cost=data.get("mana_cost"),
            oracle_text=data.get("oracle_text"),
            image_uris=data.get("image_uris"),
            face_image_uris=tuple(
                face["image_uris"] for face in faces if face.get("image_uris")
            ),
            rarity=data.get("rarity"),
            set_code=data.get("set"),
            set_name=data.get("set_name"),
            produced_mana=tuple(data.get("produced_mana") or ()),
        )

    def to_scryfall(self) -> dict[str, Any]:
        """Serialize back to the Scryfall object shape used on the wire."""
        data: dict[str, Any] = {
            "id": self.id,
            "name": self.name,
            "type_line": self.type_line,
        }
        if self.mana_cost is not None:
            data["mana_cost"] = self.mana_cost
        if self.oracle_text is not None:
            data["oracle_text"] = self.oracle_text
        if self.image_uris is not None:
            data["image_uris"] = dict(self.image_uris)
        if self.face_image_uris:
            data["card_faces"] = [{"image_uris": dict(uris)} for uris in self.face_image_uris]
        if self.rarity is not None:
            data["rarity"] = self.rarity
        if self.set_code is not None:
            data["set"] = self.set_code
        if self.set_name is not None:
            data["set_name"] = self.set_name
        if self.produced_mana:
            data["produced_mana"] = list(self.produced_mana)
        return data

    def has_type(self, keyword: str) -> bool:
        """Case-insensitive substring check against the type line."""
        return keyword.lower() in self.type_line.lower()

    @property
    def is_attachment(self) -> bool:
        """True for Equipment, Auras and Fortifications."""
        return any(self.has_type(t) for t in ATTACHMENT_TYPES)

    @property
    def is_aura(self) -> bool:
        return self.has_type("aura")

    def image_url(self, size: str = "normal") -> str:
        """
        Image URL for the card, falling back to the front face, then the card back.

        Args:
            size: small, normal, large, png or art_crop
        """
        if self.image_uris:
            return self.image_uris.get(size) or self.image_uris.get("normal", CARD_BACK_URL)
        if self.face_image_uris:
            front = self.face_image_uris[0]
            return front.get(size) or front.get("normal", CARD_BACK_URL)
        return CARD_BACK_URL
