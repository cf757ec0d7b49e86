class AppError(Exception):
    """Base class for all application exceptions."""
    def __init__(self, message: str, status_code: int = 500, details: dict = None):
        self.message = message
        self.status_code = status_code
        self.details = details or {}
        super().__init__(self.message)

class ScheduleValidationError(AppError):
    """Raised when a schedule mutation is missing or carries invalid fields."""
    def __init__(self, message: str, details: dict = None):
        super().__init__(message, status_code=400, details=details)

class ResourceNotFoundError(AppError):
    """Raised when a requested resource is not found."""
    def __init__(self, resource_type: str, resource_id: str):
        self.resource_type = resource_type
        self.resource_id = resource_id
        super().__init__(f"{resource_type} with id {resource_id} not found", status_code=404)

class ScheduleConflictError(AppError):
    """Raised when persisting a schedule would double-book a slot or a room."""
    def __init__(self, message: str, details: dict = None):
        super().__init__(message, status_code=409, details=details)

class BackendError(AppError):
    """Raised for transport failures and unexpected backend responses."""
    def __init__(self, message: str, status_code: int = 502, details: dict = None):
        super().__init__(message, status_code=status_code, details=details)

class CommitAbortedError(BackendError):
    """Raised when a commit replay stops on an unexpected error."""
    def __init__(self, message: str, report, cause: AppError | None = None):
        self.report = report
        self.cause = cause
        status_code = cause.status_code if cause is not None else 502
        super().__init__(message, status_code=status_code, details=cause.details if cause is not None else None)

class CommitRefreshError(BackendError):
    """Raised when a commit was replayed but the timetable could not be reloaded."""
    def __init__(self, message: str, report, cause: AppError):
        self.report = report
        self.cause = cause
        super().__init__(message, status_code=cause.status_code, details=cause.details)
