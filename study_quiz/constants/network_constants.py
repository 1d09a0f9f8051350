"""Network configuration constants for the quiz service."""

DEFAULT_HOST: str = "0.0.0.0"
DEFAULT_PORT: int = 8080

DISCORD_AUTHORIZE_URL: str = "https://discord.com/oauth2/authorize"
DISCORD_TOKEN_URL: str = "https://discord.com/api/v10/oauth2/token"
DISCORD_GUILD_MEMBER_URL: str = "https://discord.com/api/users/@me/guilds/{guild_id}/member"
DISCORD_SCOPES: tuple[str, ...] = ("identify", "guilds.members.read")
IDENTITY_TIMEOUT_SECONDS: float = 30.0
