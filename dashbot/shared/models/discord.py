"""Snapshots of Discord OAuth payloads (users/@me and users/@me/guilds)."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, computed_field

# Discord permission bits
ADMINISTRATOR = 0x8
MANAGE_GUILD = 0x20


class DiscordUser(BaseModel):
    """Profile of the logged-in user."""

    model_config = ConfigDict(extra="ignore", frozen=True)

    id: str
    username: str
    discriminator: str = "0"
    avatar: str | None = None
    email: str | None = None
    global_name: str | None = None

    @computed_field  # type: ignore[prop-decorator]
    @property
    def display_name(self) -> str:
        return self.global_name or self.username

    @computed_field  # type: ignore[prop-decorator]
    @property
    def avatar_url(self) -> str:
        if self.avatar:
            ext = "gif" if self.avatar.startswith("a_") else "png"
            return f"https://cdn.discordapp.com/avatars/{self.id}/{self.avatar}.{ext}"
        return f"https://cdn.discordapp.com/embed/avatars/{(int(self.id) >> 22) % 6}.png"


class DiscordGuild(BaseModel):
    """A guild the logged-in user belongs to, with their permission bitmask."""

    model_config = ConfigDict(extra="ignore", frozen=True)

    id: str
    name: str
    icon: str | None = None
    owner: bool = False
    permissions: int = 0

    @property
    def is_admin(self) -> bool:
        return self.owner or (self.permissions & ADMINISTRATOR) == ADMINISTRATOR

    @property
    def can_manage(self) -> bool:
        return self.is_admin or (self.permissions & MANAGE_GUILD) == MANAGE_GUILD
