# SPDX-License-Identifier: LGPL-3.0-or-later
# -*- coding: utf-8 -*-
# wupolicy/policy/store.py
"""
Policy store access.

The reconciler only sees the PolicyStore interface; the registry lives behind
WinRegPolicyStore so tests and dry runs never touch machine state.

Namespaces are written the way reg.exe prints them, e.g.
  HKLM\\SOFTWARE\\Policies\\Microsoft\\Windows\\WindowsUpdate
"""
from __future__ import annotations

import abc
import importlib
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional, Tuple

from ..core.exceptions import StoreError, wrap_store
from ..core.logger import Log


class ValueKind(Enum):
    DWORD = "REG_DWORD"
    QWORD = "REG_QWORD"
    SZ = "REG_SZ"
    EXPAND_SZ = "REG_EXPAND_SZ"

    @property
    def is_integer(self) -> bool:
        return self in (ValueKind.DWORD, ValueKind.QWORD)

    def coerce(self, value: Any) -> Any:
        """Convert value to what this kind stores; ValueError/TypeError if it can't."""
        if self.is_integer:
            if isinstance(value, bool):
                return int(value)
            return int(str(value).strip()) if isinstance(value, str) else int(value)
        return str(value)


@dataclass(frozen=True)
class StoredValue:
    value: Any
    kind: ValueKind


class PolicyStore(abc.ABC):
    @abc.abstractmethod
    def exists(self, namespace: str) -> bool: ...

    @abc.abstractmethod
    def create_namespace(self, namespace: str) -> None: ...

    @abc.abstractmethod
    def get_value(self, namespace: str, key: str) -> Optional[StoredValue]:
        """Stored value, or None when the namespace or the value is absent."""

    @abc.abstractmethod
    def set_value(self, namespace: str, key: str, value: Any, kind: ValueKind) -> None: ...


# ---------------------------------------------------------------------------
# winreg-backed store
# ---------------------------------------------------------------------------

_HIVE_NAMES = {
    "HKLM": "HKEY_LOCAL_MACHINE",
    "HKEY_LOCAL_MACHINE": "HKEY_LOCAL_MACHINE",
    "HKCU": "HKEY_CURRENT_USER",
    "HKEY_CURRENT_USER": "HKEY_CURRENT_USER",
}


def split_namespace(namespace: str) -> Tuple[str, str]:
    """'HKLM\\SOFTWARE\\X' -> ('HKEY_LOCAL_MACHINE', 'SOFTWARE\\X')."""
    ns = (namespace or "").strip().replace("/", "\\").strip("\\")
    hive, sep, subkey = ns.partition("\\")
    if not sep or not subkey:
        raise StoreError(code=20, msg=f"Policy namespace needs a hive and a subkey: {namespace!r}")
    full = _HIVE_NAMES.get(hive.upper().rstrip(":"))
    if full is None:
        raise StoreError(code=20, msg=f"Unsupported registry hive {hive!r} in {namespace!r}")
    return full, subkey


class WinRegPolicyStore(PolicyStore):
    """
    Registry-backed store. Always uses the 64-bit view so a 32-bit interpreter
    writes the same policy keys the Windows Update client reads.
    """

    def __init__(self, logger: Optional[logging.Logger] = None, winreg: Any = None):
        self.logger = logger or logging.getLogger("wupolicy.store")
        if winreg is None:
            try:
                winreg = importlib.import_module("winreg")
            except ImportError as exc:
                raise StoreError(code=20, msg="winreg is available only on Windows", cause=exc)
        self._wr = winreg

    def _root(self, namespace: str) -> Tuple[Any, str]:
        hive, subkey = split_namespace(namespace)
        return getattr(self._wr, hive), subkey

    def _kind_from_type(self, reg_type: int) -> ValueKind:
        for kind in ValueKind:
            if getattr(self._wr, kind.value) == reg_type:
                return kind
        raise StoreError(code=21, msg=f"Unsupported registry value type {reg_type}")

    def exists(self, namespace: str) -> bool:
        root, subkey = self._root(namespace)
        try:
            with self._wr.OpenKey(root, subkey, 0, self._wr.KEY_READ | self._wr.KEY_WOW64_64KEY):
                return True
        except FileNotFoundError:
            return False
        except OSError as e:
            raise wrap_store(f"Cannot open {namespace}", e, namespace=namespace)

    def create_namespace(self, namespace: str) -> None:
        root, subkey = self._root(namespace)
        try:
            with self._wr.CreateKeyEx(root, subkey, 0, self._wr.KEY_WRITE | self._wr.KEY_WOW64_64KEY):
                pass
        except OSError as e:
            raise wrap_store(f"Cannot create {namespace}", e, namespace=namespace)
        Log.trace(self.logger, "created namespace %s", namespace)

    def get_value(self, namespace: str, key: str) -> Optional[StoredValue]:
        root, subkey = self._root(namespace)
        try:
            with self._wr.OpenKey(root, subkey, 0, self._wr.KEY_READ | self._wr.KEY_WOW64_64KEY) as k:
                value, reg_type = self._wr.QueryValueEx(k, key)
        except FileNotFoundError:
            return None
        except OSError as e:
            raise wrap_store(f"Cannot read {namespace}\\{key}", e, namespace=namespace, key=key)
        return StoredValue(value=value, kind=self._kind_from_type(reg_type))

    def set_value(self, namespace: str, key: str, value: Any, kind: ValueKind) -> None:
        root, subkey = self._root(namespace)
        try:
            with self._wr.OpenKey(root, subkey, 0, self._wr.KEY_SET_VALUE | self._wr.KEY_WOW64_64KEY) as k:
                self._wr.SetValueEx(k, key, 0, getattr(self._wr, kind.value), value)
        except OSError as e:
            raise wrap_store(f"Cannot write {namespace}\\{key}", e, namespace=namespace, key=key)


class DryRunPolicyStore(PolicyStore):
    """Reads go to the wrapped store; writes are only logged."""

    def __init__(self, inner: PolicyStore, logger: Optional[logging.Logger] = None):
        self.inner = inner
        self.logger = logger or logging.getLogger("wupolicy.store")

    def exists(self, namespace: str) -> bool:
        return self.inner.exists(namespace)

    def create_namespace(self, namespace: str) -> None:
        Log.step(self.logger, f"[dry-run] would create {namespace}")

    def get_value(self, namespace: str, key: str) -> Optional[StoredValue]:
        return self.inner.get_value(namespace, key)

    def set_value(self, namespace: str, key: str, value: Any, kind: ValueKind) -> None:
        Log.step(self.logger, f"[dry-run] would set {key} = {value!r} ({kind.value})", namespace=namespace)
