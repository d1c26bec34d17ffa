from enum import Enum


class ExpenseCategory(str, Enum):
    FOOD = "food"
    TRANSPORT = "transport"
    ACCOMMODATION = "accommodation"
    ACTIVITIES = "activities"
    SHOPPING = "shopping"
    OTHER = "other"


class SplitType(str, Enum):
    EQUAL = "equal"
    CUSTOM = "custom"


class TripStatus(str, Enum):
    DRAFT = "draft"
    ACTIVE = "active"
    FULL = "full"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class ParticipantStatus(str, Enum):
    PENDING = "pending"
    APPROVED = "approved"
    DECLINED = "declined"
    LEFT = "left"


class ActivityCategory(str, Enum):
    ACCOMMODATION = "accommodation"
    TRANSPORT = "transport"
    FOOD = "food"
    SIGHTSEEING = "sightseeing"
    SHOPPING = "shopping"
    ENTERTAINMENT = "entertainment"
    OTHER = "other"


class ActivityStatus(str, Enum):
    PLANNED = "planned"
    CONFIRMED = "confirmed"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class ActivityParticipantStatus(str, Enum):
    INTERESTED = "interested"
    CONFIRMED = "confirmed"
    DECLINED = "declined"


EXPENSE_CATEGORY_LABELS: dict[ExpenseCategory, str] = {
    ExpenseCategory.FOOD: "Food & Dining",
    ExpenseCategory.TRANSPORT: "Transportation",
    ExpenseCategory.ACCOMMODATION: "Accommodation",
    ExpenseCategory.ACTIVITIES: "Activities",
    ExpenseCategory.SHOPPING: "Shopping",
    ExpenseCategory.OTHER: "Other",
}

ACTIVITY_CATEGORY_LABELS: dict[ActivityCategory, tuple[str, str]] = {
    ActivityCategory.ACCOMMODATION: ("Accommodation", "Hotels, hostels, check-in/out"),
    ActivityCategory.TRANSPORT: ("Transportation", "Flights, trains, taxis, car rentals"),
    ActivityCategory.FOOD: ("Food & Dining", "Restaurants, cafes, food tours"),
    ActivityCategory.SIGHTSEEING: ("Sightseeing", "Museums, landmarks, tours"),
    ActivityCategory.SHOPPING: ("Shopping", "Markets, malls, souvenirs"),
    ActivityCategory.ENTERTAINMENT: ("Entertainment", "Shows, concerts, nightlife"),
    ActivityCategory.OTHER: ("Other", "Miscellaneous activities"),
}
