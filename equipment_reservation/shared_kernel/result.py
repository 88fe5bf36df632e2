"""
Тип результата (Result) для ожидаемых исходов операций.

Фабрики, репозитории и сервисы приложения возвращают ``Ok`` или ``Err``
вместо выбрасывания исключений для ожидаемых ошибок.
"""

from dataclasses import dataclass
from typing import Generic, NoReturn, TypeVar, Union

T = TypeVar("T")
E = TypeVar("E", bound=Exception)


@dataclass(frozen=True)
class Ok(Generic[T]):
    """Успешный результат."""

    value: T

    def is_ok(self) -> bool:
        return True

    def is_err(self) -> bool:
        return False

    def unwrap(self) -> T:
        return self.value

    def unwrap_err(self) -> NoReturn:
        raise ValueError(f"Результат успешен: {self.value!r}")


@dataclass(frozen=True)
class Err(Generic[E]):
    """Неуспешный результат, содержащий типизированную ошибку."""

    error: E

    def is_ok(self) -> bool:
        return False

    def is_err(self) -> bool:
        return True

    def unwrap(self) -> NoReturn:
        raise self.error

    def unwrap_err(self) -> E:
        return self.error


Result = Union[Ok[T], Err[E]]
