from typing import Optional


class ValidationError(Exception):
    """設定ファイルのバリデーションエラーを表す例外。"""

    def __init__(
        self,
        message: str,
        line_number: Optional[int] = None,
        column_number: Optional[int] = None,
    ):
        super().__init__(message)
        self.message = message
        self.line_number = line_number
        self.column_number = column_number

    def __str__(self):
        if self.line_number is not None:
            return f"Validation Error: {self.message} (Line: {self.line_number}, Column: {self.column_number})"
        return f"Validation Error: {self.message}"


class ConfigurationError(Exception):
    """パラメータスキーマの定義不備を表す例外。読み込み時に発生する。"""

    def __init__(self, message: str, group: Optional[str] = None, option: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.group = group
        self.option = option

    def __str__(self):
        if self.group is not None and self.option is not None:
            return f"Configuration Error: {self.message} ({self.group}.{self.option})"
        if self.group is not None:
            return f"Configuration Error: {self.message} ({self.group})"
        return f"Configuration Error: {self.message}"


class ApiError(Exception):
    """Wistia APIとの通信で発生したエラーを表す例外。"""

    def __init__(self, message: str, code: int = 0):
        super().__init__(message)
        self.message = message
        self.code = code

    def __str__(self):
        return f"Wistia Error: {self.message} (Code: {self.code})"


class ApiKeyError(ApiError):
    """APIキーが未設定、または16進数ではない場合の例外。"""


class InvalidVideoIdError(ApiError):
    """動画IDが空、または0の場合の例外。"""
