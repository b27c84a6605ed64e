from .service import InvalidToken, TokenService, get_token_service

__all__ = ["InvalidToken", "TokenService", "get_token_service"]
