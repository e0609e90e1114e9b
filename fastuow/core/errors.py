class FastUoWError(Exception):
    """``FastUoW`` 와 관련된 모든 에러의 기본 클래스."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    ...


class FastUoWConfigError(FastUoWError):
    """앱 설정 로딩 실패 에러."""

    ...


class OperationFailure(FastUoWError):
    """UoW 안에서 persist/query/commit 중 발생한 DB 에러.

    원본 예외는 ``__cause__`` 로 연결됩니다.
    """

    ...
