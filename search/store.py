from typing import Dict, Iterator, List, Mapping, Optional, Tuple
from search.exceptions import InvalidParameterError

class ParameterStore:
    """
    Untyped name -> string storage for query parameters.

    A missing name means "let the service apply its default"; it is never
    the same thing as an empty string. Names are not validated, so parameters
    without a typed accessor can still be passed through.
    """

    def __init__(self, parameters: Optional[Mapping[str, str]] = None):
        self._parameters: Dict[str, str] = {}
        if parameters:
            for name, value in parameters.items():
                self.set(name, value)

    def get(self, name: str) -> Optional[str]:
        return self._parameters.get(name)

    def set(self, name: str, value: Optional[str]) -> None:
        if value is None:
            self._parameters.pop(name, None)
            return

        if not isinstance(value, str):
            raise InvalidParameterError(
                f"Raw value for '{name}' must be a string",
                details={"name": name, "type": type(value).__name__}
            )
        self._parameters[name] = value

    def remove(self, name: str) -> None:
        self._parameters.pop(name, None)

    def __getitem__(self, name: str) -> Optional[str]:
        return self.get(name)

    def __setitem__(self, name: str, value: Optional[str]) -> None:
        self.set(name, value)

    def __delitem__(self, name: str) -> None:
        self.remove(name)

    def __contains__(self, name: object) -> bool:
        return name in self._parameters

    def __len__(self) -> int:
        return len(self._parameters)

    def __iter__(self) -> Iterator[str]:
        return iter(list(self._parameters))

    def items(self) -> List[Tuple[str, str]]:
        return list(self._parameters.items())

    def sorted_items(self) -> List[Tuple[str, str]]:
        # plain str ordering is code point order
        return sorted(self._parameters.items(), key=lambda item: item[0])

    def to_dict(self) -> Dict[str, str]:
        return dict(self._parameters)

    def copy(self) -> "ParameterStore":
        return ParameterStore(self._parameters)

    def __eq__(self, other):
        if not isinstance(other, ParameterStore):
            return NotImplemented
        return self._parameters == other._parameters

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self):
        return f"ParameterStore({self._parameters!r})"
