"""
Atom Registry

Interns the ICCCM atoms once at startup and caches them for the lifetime of
the process.
"""

from __future__ import annotations
from typing import Dict, Iterable, TYPE_CHECKING

if TYPE_CHECKING:
    from .connection import XConnection


ICCCM_ATOMS = ("WM_PROTOCOLS", "WM_DELETE_WINDOW", "WM_TAKE_FOCUS")


class AtomRegistry:
    """Name to atom id cache.

    The ICCCM atoms are resolved eagerly, so a failure to intern them is a
    startup error rather than something discovered on the first close.
    """

    def __init__(self, conn: "XConnection", names: Iterable[str] = ICCCM_ATOMS):
        self.conn = conn
        self._atoms: Dict[str, int] = {}
        for name in names:
            self.get(name)

    def get(self, name: str) -> int:
        """Atom id for NAME, interning it on first use."""
        if name not in self._atoms:
            self._atoms[name] = self.conn.intern_atom(name)
        return self._atoms[name]

    def name_of(self, atom: int) -> str:
        for name, value in self._atoms.items():
            if value == atom:
                return name
        return str(atom)

    @property
    def WM_PROTOCOLS(self) -> int:
        return self.get("WM_PROTOCOLS")

    @property
    def WM_DELETE_WINDOW(self) -> int:
        return self.get("WM_DELETE_WINDOW")

    @property
    def WM_TAKE_FOCUS(self) -> int:
        return self.get("WM_TAKE_FOCUS")
