"""Category and tag registries.

Both registries are plain objects constructed by the caller and passed to
whatever needs them; custom entries live only in the instance.
"""

from uuid import UUID, uuid4

from pydantic import BaseModel, ConfigDict, Field


class CategoryInfo(BaseModel):
    """Display metadata for an item category."""

    model_config = ConfigDict(frozen=True)

    id: UUID = Field(default_factory=uuid4)
    name: str = Field(..., min_length=1)
    icon: str = "cube.box.fill"
    color_hex: str = Field("8E8E93", pattern=r"^[0-9A-Fa-f]{3}([0-9A-Fa-f]{3})?([0-9A-Fa-f]{2})?$")
    is_custom: bool = False


PREDEFINED_CATEGORIES = (
    CategoryInfo(name="Electronics", icon="desktopcomputer", color_hex="007AFF"),
    CategoryInfo(name="Appliances", icon="refrigerator.fill", color_hex="AF52DE"),
    CategoryInfo(name="Furniture", icon="chair.lounge.fill", color_hex="FF9500"),
    CategoryInfo(name="Clothing", icon="tshirt.fill", color_hex="FF2D55"),
    CategoryInfo(name="Kitchen", icon="fork.knife", color_hex="FF3B30"),
    CategoryInfo(name="Tools", icon="wrench.and.screwdriver.fill", color_hex="5856D6"),
    CategoryInfo(name="Sports", icon="figure.run", color_hex="34C759"),
    CategoryInfo(name="Garden", icon="leaf.fill", color_hex="32D74B"),
    CategoryInfo(name="Automotive", icon="car.fill", color_hex="8E8E93"),
    CategoryInfo(name="Home Decor", icon="lamp.table.fill", color_hex="FF9500"),
    CategoryInfo(name="Office", icon="keyboard", color_hex="5AC8FA"),
    CategoryInfo(name="Audio/Video", icon="hifispeaker.fill", color_hex="007AFF"),
    CategoryInfo(name="Gaming", icon="gamecontroller.fill", color_hex="AF52DE"),
    CategoryInfo(
        name="Baby & Kids", icon="figure.and.child.holdinghands", color_hex="FF2D55"
    ),
    CategoryInfo(name="Pet Supplies", icon="pawprint.fill", color_hex="FF9500"),
    CategoryInfo(name="Other", icon="cube.box.fill", color_hex="8E8E93"),
)

PREDEFINED_TAGS = (
    "Important",
    "Gift",
    "Urgent",
    "High Value",
    "Replacement Needed",
    "Under Review",
    "Extended Warranty",
    "Limited Edition",
    "Vintage",
    "Collectible",
)


class CategoryRegistry:
    """Predefined categories plus user-defined ones."""

    def __init__(self, custom: list[CategoryInfo] | None = None) -> None:
        self.predefined: tuple[CategoryInfo, ...] = PREDEFINED_CATEGORIES
        self.custom: list[CategoryInfo] = [
            category.model_copy(update={"is_custom": True}) for category in custom or []
        ]

    @property
    def all(self) -> list[CategoryInfo]:
        return [*self.predefined, *self.custom]

    @property
    def names(self) -> list[str]:
        return [category.name for category in self.all]

    def get(self, name: str) -> CategoryInfo | None:
        for category in self.all:
            if category.name == name:
                return category
        return None

    def add(self, category: CategoryInfo) -> CategoryInfo:
        """Register a custom category.

        Raises:
            ValueError: If a category with the same name already exists.
        """
        if self.get(category.name) is not None:
            raise ValueError(f"Category already exists: {category.name}")
        custom = category.model_copy(update={"is_custom": True})
        self.custom.append(custom)
        return custom

    def update(self, category: CategoryInfo) -> bool:
        """Replace the custom category with the same id. Returns False if
        there is none; predefined categories cannot be changed.
        """
        for index, existing in enumerate(self.custom):
            if existing.id == category.id:
                self.custom[index] = category.model_copy(update={"is_custom": True})
                return True
        return False

    def remove(self, category_id: UUID) -> bool:
        before = len(self.custom)
        self.custom = [c for c in self.custom if c.id != category_id]
        return len(self.custom) != before


class TagRegistry:
    """Predefined tags plus user-defined ones."""

    def __init__(self, custom: list[str] | None = None) -> None:
        self.predefined: tuple[str, ...] = PREDEFINED_TAGS
        self.custom: list[str] = []
        for tag in custom or []:
            self.add(tag)

    @property
    def all(self) -> list[str]:
        return sorted([*self.predefined, *self.custom])

    def add(self, tag: str) -> str | None:
        """Add a custom tag; blank and already known tags are ignored.

        Returns:
            The stored tag, or None if nothing was added.
        """
        trimmed = tag.strip()
        if not trimmed or trimmed in self.all:
            return None
        self.custom.append(trimmed)
        return trimmed

    def remove(self, tag: str) -> bool:
        if tag not in self.custom:
            return False
        self.custom.remove(tag)
        return True
