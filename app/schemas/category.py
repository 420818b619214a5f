from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class CategoryIcon(str, Enum):
    """Closed set of icon identifiers a category node may use."""

    SHIELD = "Shield"
    SMARTPHONE = "Smartphone"
    GAMEPAD = "Gamepad2"
    BRIEFCASE = "Briefcase"
    ZAP = "Zap"
    GLOBE = "Globe"
    TV = "Tv"
    GIFT = "Gift"
    SERVER = "Server"
    CLOUD = "Cloud"
    LOCK = "Lock"
    WIFI = "Wifi"
    BOX = "Box"
    LAYERS = "Layers"
    TAG = "Tag"
    STAR = "Star"
    HEART = "Heart"
    MONITOR = "Monitor"
    CPU = "Cpu"
    DATABASE = "Database"
    CODE = "Code"
    PEN_TOOL = "PenTool"
    CAMERA = "Camera"
    MUSIC = "Music"
    VIDEO = "Video"
    BOOK = "Book"
    COFFEE = "Coffee"
    TRUCK = "Truck"
    SHOPPING_BAG = "ShoppingBag"
    HOME = "Home"
    TOOL = "Tool"
    ACTIVITY = "Activity"
    TRENDING_UP = "TrendingUp"
    USERS = "Users"
    MESSAGE_SQUARE = "MessageSquare"
    MAIL = "Mail"
    CALENDAR = "Calendar"
    CAR = "Car"
    WRENCH = "Wrench"
    SCISSORS = "Scissors"
    PAINTBRUSH = "Paintbrush"
    PALETTE = "Palette"
    MAP_PIN = "MapPin"
    COMPASS = "Compass"
    NAVIGATION = "Navigation"
    PLANE = "Plane"
    BIKE = "Bike"


class CategoryColor(str, Enum):
    """Closed set of color tokens understood by the storefront theme."""

    EMERALD = "text-emerald-500"
    BLUE = "text-blue-500"
    PURPLE = "text-purple-500"
    SLATE = "text-slate-500"
    ROSE = "text-rose-500"
    AMBER = "text-amber-500"
    INDIGO = "text-indigo-500"
    CYAN = "text-cyan-500"
    PINK = "text-pink-500"
    RED = "text-red-500"
    ORANGE = "text-orange-500"
    YELLOW = "text-yellow-500"
    LIME = "text-lime-500"
    GREEN = "text-green-500"
    TEAL = "text-teal-500"
    SKY = "text-sky-500"
    FUCHSIA = "text-fuchsia-500"
    VIOLET = "text-violet-500"


# Tree node payloads (input)
class TreeNodeBase(BaseModel):
    model_config = ConfigDict(use_enum_values=True)

    id: Optional[str] = Field(None, max_length=64)
    label: str = Field(..., min_length=1, max_length=255)
    label_fr: str = Field("", max_length=255)
    label_ar: str = Field("", max_length=255)
    desc: Optional[str] = None
    desc_fr: Optional[str] = None
    desc_ar: Optional[str] = None
    icon: Optional[CategoryIcon] = None
    color: Optional[CategoryColor] = None
    order: int = 0


class SecondSubcategoryIn(TreeNodeBase):
    fee: Decimal = Field(Decimal("0"), ge=0, le=100)


class SubcategoryIn(TreeNodeBase):
    fee: Decimal = Field(Decimal("0"), ge=0, le=100)
    second_subcategories: list[SecondSubcategoryIn] = Field(default_factory=list)


class CategoryBase(BaseModel):
    model_config = ConfigDict(use_enum_values=True)

    label: str = Field(..., min_length=1, max_length=255)
    label_fr: str = Field("", max_length=255)
    label_ar: str = Field("", max_length=255)
    icon: CategoryIcon = CategoryIcon.BOX
    color: CategoryColor = CategoryColor.SLATE
    desc: str = ""
    desc_fr: str = ""
    desc_ar: str = ""
    order: int = 0
    subcategories: list[SubcategoryIn] = Field(default_factory=list)


class CategoryCreate(CategoryBase):
    id: Optional[str] = Field(
        None, max_length=64, description="Slugified from the label when omitted"
    )


class CategoryUpdate(CategoryBase):
    """Full replacement of a category and its subtree (the id is immutable)."""


# Tree node responses
class SecondSubcategory(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    subcategory_id: str
    label: str
    label_fr: str
    label_ar: str
    desc: Optional[str] = None
    desc_fr: Optional[str] = None
    desc_ar: Optional[str] = None
    icon: Optional[CategoryIcon] = None
    color: Optional[CategoryColor] = None
    fee: Decimal
    order: int


class Subcategory(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    category_id: str
    label: str
    label_fr: str
    label_ar: str
    desc: Optional[str] = None
    desc_fr: Optional[str] = None
    desc_ar: Optional[str] = None
    icon: Optional[CategoryIcon] = None
    color: Optional[CategoryColor] = None
    fee: Decimal
    order: int
    second_subcategories: list[SecondSubcategory] = Field(default_factory=list)


class Category(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    label: str
    label_fr: str
    label_ar: str
    icon: CategoryIcon
    color: CategoryColor
    desc: str
    desc_fr: str
    desc_ar: str
    order: int
    created_at: Optional[datetime] = None
    subcategories: list[Subcategory] = Field(default_factory=list)
