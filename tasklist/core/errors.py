class IdentityError(Exception):
    """Ошибки регистрации учетных записей"""


class DuplicateEmail(IdentityError):
    pass


class HashingFailure(IdentityError):
    pass


class AuthError(Exception):
    """Ошибки проверки сессионного токена"""


class Unauthenticated(AuthError):
    pass


class ExpiredToken(AuthError):
    pass


class TaskAccessError(Exception):
    """Задача недоступна текущему аккаунту"""

    def __init__(self, task_id):
        super().__init__(f"Task {task_id} is not accessible")
        self.task_id = task_id


class NotFound(TaskAccessError):
    pass


class Forbidden(TaskAccessError):
    pass


class StoreError(Exception):
    """Сбой хранилища"""
