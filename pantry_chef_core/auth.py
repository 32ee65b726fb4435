from __future__ import annotations

"""
pantry_chef_core.auth
=====================

Validación de los access tokens que emite Supabase Auth.

La app no emite ni renueva sesiones: solo comprueba que el token del
request sea auténtico y devuelve el id del usuario (`sub`). Hay dos modos:

- Con `SUPABASE_JWT_SECRET`: se valida firma (HS256), `exp` y audiencia
  localmente con PyJWT, sin ir a la red.
- Sin secret: se le pregunta a Supabase (`auth.get_user(token)`), que
  rechaza tokens con firma inválida, vencidos o revocados.

Un token con `alg: none` o firmado con otra clave nunca pasa.
"""

import logging
from typing import Any, Optional

import jwt  # pyjwt

from .errors import AuthenticationError, MissingConfigurationError

logger = logging.getLogger(__name__)

SUPABASE_AUDIENCE = "authenticated"
SUPABASE_ALGORITHMS = ["HS256"]


class TokenVerifier:
    def __init__(self, *, jwt_secret: Optional[str] = None, auth_client: Any = None):
        self.jwt_secret = jwt_secret or None
        self.auth_client = auth_client

    @property
    def configured(self) -> bool:
        return self.jwt_secret is not None or self.auth_client is not None

    def verify(self, access_token: str) -> str:
        """
        Devuelve el id de usuario del token.

        Raises
        ------
        AuthenticationError
            Si el token es inválido, vencido o no identifica a un usuario.
        MissingConfigurationError
            Si no hay ni JWT secret ni cliente de Supabase para validar.
        """
        if not access_token:
            raise AuthenticationError()
        if self.jwt_secret is not None:
            return self._verify_locally(access_token)
        if self.auth_client is not None:
            return self._verify_with_supabase(access_token)
        raise MissingConfigurationError("Authentication is not configured")

    def _verify_locally(self, access_token: str) -> str:
        try:
            claims = jwt.decode(
                access_token,
                self.jwt_secret,
                algorithms=SUPABASE_ALGORITHMS,
                audience=SUPABASE_AUDIENCE,
                options={"require": ["exp", "sub"]},
            )
        except jwt.ExpiredSignatureError as e:
            raise AuthenticationError("Token has expired") from e
        except jwt.InvalidTokenError as e:
            logger.warning(f"Token rechazado: {e}")
            raise AuthenticationError() from e

        user_id = claims.get("sub")
        if not user_id:
            raise AuthenticationError("Invalid token: no user ID found")
        return str(user_id)

    def _verify_with_supabase(self, access_token: str) -> str:
        try:
            response = self.auth_client.get_user(access_token)
        except Exception as e:
            logger.warning(f"Supabase Auth rechazó el token: {e}")
            raise AuthenticationError() from e

        user = getattr(response, "user", None)
        if user is None or not getattr(user, "id", None):
            raise AuthenticationError()
        return str(user.id)
