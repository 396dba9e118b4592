"""
Player data model and related enums.

This is the core entity representing Madden league players in our system.
Players are snapshots fetched from the Couchlytics backend and are never
mutated client-side, so the model is frozen.
"""

from enum import Enum
from typing import Optional
from pydantic import BaseModel, ConfigDict, Field, field_validator


class PlayerPosition(str, Enum):
    # Offense
    QB = "QB"
    HB = "HB"
    FB = "FB"
    WR = "WR"
    TE = "TE"
    LT = "LT"
    LG = "LG"
    C = "C"
    RG = "RG"
    RT = "RT"

    # Defense
    LE = "LE"
    RE = "RE"
    DT = "DT"
    LOLB = "LOLB"
    MLB = "MLB"
    ROLB = "ROLB"
    CB = "CB"
    FS = "FS"
    SS = "SS"

    # Special teams
    K = "K"
    P = "P"

    @classmethod
    def parse(cls, value: Optional[str]) -> Optional["PlayerPosition"]:
        """Return the matching position, or None for unknown abbreviations."""
        if not value:
            return None
        try:
            return cls(value.upper())
        except ValueError:
            return None


class DevTrait(str, Enum):
    NORMAL = "Normal"
    STAR = "Star"
    SUPERSTAR = "Superstar"
    HIDDEN = "Hidden"

    @classmethod
    def parse(cls, value: Optional[str]) -> Optional["DevTrait"]:
        if not value:
            return None
        try:
            return cls(value)
        except ValueError:
            return None


class PositionGroup(str, Enum):
    OFFENSE = "Offense"
    DEFENSE = "Defense"
    SPECIAL_TEAMS = "Special Teams"
    OTHER = "Other"


class Player(BaseModel):
    """
    Represents a Madden player as returned by the league players endpoint.

    Only the fields the trade tools care about are modelled; anything else
    the backend sends is ignored. Missing ratings and positions are left
    as None so the evaluator can apply its own defaults instead of failing
    validation.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")

    id: int
    name: str
    position: Optional[str] = None
    team: str = ""

    ovr: Optional[int] = Field(None, description="Overall rating (0-99)")
    age: Optional[int] = None
    dev_trait: Optional[str] = Field(None, alias="devTrait")

    team_id: Optional[int] = Field(None, alias="teamId")
    team_name: Optional[str] = Field(None, alias="teamName")
    espn_id: Optional[str] = Field(None, alias="espnId")
    years_pro: Optional[int] = Field(None, alias="yearsPro")
    trade_blocked: Optional[bool] = Field(None, alias="tradeBlocked")

    @field_validator("position")
    @classmethod
    def normalize_position(cls, v):
        if v is None:
            return None
        return v.strip().upper() or None

    @field_validator("team", mode="before")
    @classmethod
    def free_agent_team(cls, v):
        return v or ""

    @field_validator("espn_id", mode="before")
    @classmethod
    def espn_id_as_string(cls, v):
        # The backend sends ESPN ids as numbers for some leagues
        return str(v) if v is not None else None

    @field_validator("dev_trait", mode="before")
    @classmethod
    def blank_dev_trait_is_missing(cls, v):
        if isinstance(v, str) and not v.strip():
            return None
        return v

    def __str__(self) -> str:
        return f'{self.name} ({self.position}, {self.team})'

    @property
    def known_position(self) -> Optional[PlayerPosition]:
        return PlayerPosition.parse(self.position)

    @property
    def known_dev_trait(self) -> Optional[DevTrait]:
        return DevTrait.parse(self.dev_trait)


class Team(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")

    id: int
    name: str
    city: Optional[str] = None
    user: Optional[str] = None
    user_id: Optional[int] = None


class User(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")

    id: int
    email: Optional[str] = None
    is_premium: Optional[bool] = None
    team_id: Optional[int] = Field(None, alias="teamId")
