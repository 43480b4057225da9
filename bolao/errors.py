"""
Error taxonomy for the bolão core.

Routes let these propagate; the handler registered in ``create_app`` turns
them into JSON bodies of the form ``{"error": ..., "code": ...}``.
"""


class BolaoError(Exception):
    """Base class for errors a client can act on"""

    status_code = 400
    code = "error"

    def __init__(self, message=None):
        super().__init__(message or self.__class__.__doc__)
        self.message = message or self.__class__.__doc__

    def to_dict(self):
        return {"error": self.message, "code": self.code}


class ValidationError(BolaoError):
    """Dados inválidos"""

    status_code = 400
    code = "validation"


class NotFoundError(BolaoError):
    """Registro não encontrado"""

    status_code = 404
    code = "not_found"


class LockedError(BolaoError):
    """Palpites travados (kickoff da rodada já iniciou)."""

    status_code = 403
    code = "locked"


class DecodeError(Exception):
    """Stored pick could not be decrypted or is not a known choice.

    Never leaves the outcome codec: ``try_decode_pick`` downgrades it to
    "no pick".
    """
