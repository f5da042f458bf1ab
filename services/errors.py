"""Typed errors raised by the service layer.

Each error carries the HTTP status the presentation layer should answer
with, so the JSON API and the HTML views can both report it without
inspecting message text.
"""


class ServiceError(Exception):
    status_code = 500

    def __init__(self, message, status_code=None):
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code

    def to_dict(self):
        return {'status': self.status_code, 'message': self.message, 'data': None}


class NotFoundError(ServiceError):
    status_code = 404


class InvalidRequestError(ServiceError):
    status_code = 400


class UnauthorizedError(ServiceError):
    status_code = 401


class ForbiddenError(ServiceError):
    status_code = 403


class InternalError(ServiceError):
    status_code = 500
