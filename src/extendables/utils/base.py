"""
Result type shared by the evaluator and the loaders
"""

from dataclasses import dataclass
from enum import Enum
from typing import Generic, TypeVar, Union

T = TypeVar('T')
E = TypeVar('E')


class ResultTag(Enum):
    """Result discriminant"""
    OK = "ok"
    ERR = "err"


@dataclass
class Result(Generic[T, E]):
    """Result type: Ok(T) | Err(E)"""
    tag: ResultTag
    value: Union[T, E]

    @classmethod
    def ok(cls, value: T) -> 'Result[T, E]':
        """Create successful result"""
        return cls(ResultTag.OK, value)

    @classmethod
    def err(cls, error: E) -> 'Result[T, E]':
        """Create error result"""
        return cls(ResultTag.ERR, error)

    def is_ok(self) -> bool:
        return self.tag == ResultTag.OK

    def is_err(self) -> bool:
        return self.tag == ResultTag.ERR

    def unwrap(self) -> T:
        """Extract Ok value (throws if Err)"""
        if self.is_err():
            raise ValueError(f"Called unwrap() on Err: {self.value}")
        return self.value

    def __str__(self) -> str:
        if self.is_ok():
            return f"Ok({self.value})"
        return f"Err({self.value})"

    def __repr__(self) -> str:
        return self.__str__()
