import os
from pathlib import Path
from typing import Dict, Iterable, Optional, Set

from dotenv import dotenv_values, set_key
from dotenv.parser import parse_stream

from common.const.const import DEFAULT_PARAMETER_FILE, PARAMETER_FILE_ENV_VAR
from common.const.parameter_names import REQUIRED_PARAMETERS
from common.logging_config import logger


class ParameterError(Exception):
    """Raised when the parameter set is missing values an operation needs."""

    def __init__(self, message: str, missing: Iterable[str] = ()):
        super().__init__(message)
        self.missing = list(missing)


def default_parameter_file() -> Path:
    return Path(os.environ.get(PARAMETER_FILE_ENV_VAR, DEFAULT_PARAMETER_FILE))


class ParameterStore:
    """
    Flat name=value parameter set backed by a shell-style assignments file.

    The file holds the user supplied cluster settings and accumulates values
    produced by earlier operations (subnet ids, OIDC config id, account id).
    """

    def __init__(self, path: Optional[Path] = None):
        self._path = Path(path) if path is not None else default_parameter_file()
        self._params: Dict[str, Optional[str]] = {}
        self._exported: Set[str] = set()
        self._dirty: Dict[str, str] = {}

    @property
    def path(self) -> Path:
        return self._path

    @property
    def parameters(self) -> Dict[str, Optional[str]]:
        return dict(self._params)

    def exists(self) -> bool:
        return self._path.is_file()

    def load(self) -> "ParameterStore":
        if not self.exists():
            raise FileNotFoundError(f"Parameter file {self._path} not found")

        self._params.update(dotenv_values(self._path))

        # remember which names use the export form so save() keeps it
        with open(self._path, "r") as f:
            for binding in parse_stream(f):
                if binding.key is not None and binding.original.string.lstrip().startswith("export "):
                    self._exported.add(binding.key)

        logger.info(f"Loaded {len(self._params)} parameters from {self._path}")
        return self

    def get_input_param(self, name: str, default: Optional[str] = None) -> Optional[str]:
        value = self._params.get(name)
        if value is None or value == "":
            return default
        return value

    def __getitem__(self, name: str) -> str:
        value = self.get_input_param(name)
        if value is None:
            raise ParameterError(f"Parameter {name} is not set in {self._path}", [name])
        return value

    def __contains__(self, name: str) -> bool:
        return self.get_input_param(name) is not None

    def missing(self, names: Iterable[str]) -> list:
        return [n for n in names if n not in self]

    def validate(self, names: Iterable[str] = REQUIRED_PARAMETERS):
        """Raise ParameterError listing every name that is absent or empty."""
        missing = self.missing(names)
        if missing:
            raise ParameterError(f"Missing parameters in {self._path}: {', '.join(missing)}", missing)

    def set(self, name: str, value: str):
        self._params[name] = value
        self._dirty[name] = value

    def update(self, values: Dict[str, str]):
        for k, v in values.items():
            self.set(k, v)

    def save(self):
        """
        Write values set since the last save back to the file.

        Lines assigning an updated name are rewritten in place; new names are
        appended. Comments and unrelated lines are left untouched.
        """
        if not self._dirty:
            return

        for name, value in self._dirty.items():
            set_key(str(self._path), name, value, quote_mode="never", export=name in self._exported)

        logger.info(f"Saved {', '.join(self._dirty)} to {self._path}")
        self._dirty.clear()
