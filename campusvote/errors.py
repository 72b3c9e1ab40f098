"""Error taxonomy shared by the stores, services and HTTP layer.

Every error carries a ``kind`` (rendered to clients verbatim), a human readable
message and the HTTP status the API answers with.
"""


class VotingError(Exception):
    kind = "Error"
    status_code = 400

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def to_dict(self) -> dict:
        return {"kind": self.kind, "message": self.message}


class NotFound(VotingError):
    kind = "NotFound"
    status_code = 404


class InvalidState(VotingError):
    kind = "InvalidState"
    status_code = 400


class Conflict(VotingError):
    kind = "Conflict"
    status_code = 409


class Unauthorized(VotingError):
    kind = "Unauthorized"
    status_code = 401


class Forbidden(VotingError):
    kind = "Forbidden"
    status_code = 403


class ValidationError(VotingError):
    kind = "ValidationError"
    status_code = 400
