# Copyright (C) 2025 Richard Owen
#
# This program is free software: you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation, either version 3 of the License, or
# (at your option) any later version.
#
# This program is distributed in the hope that it will be useful,
# but WITHOUT ANY WARRANTY; without even the implied warranty of
# MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE.  See the
# GNU General Public License for more details.
#
# You should have received a copy of the GNU General Public License
# along with this program.  If not, see <https://www.gnu.org/licenses/>.
"""Numpydoc checks over every kickabout module: parameters, returns and summaries."""

import importlib
import inspect
import pkgutil
from types import ModuleType
from typing import Iterator, List

import pytest
from numpydoc.docscrape import NumpyDocString

import kickabout


def _modules() -> List[ModuleType]:
    """Import the package and all of its submodules; import errors fail collection."""
    found = [kickabout]
    for info in pkgutil.walk_packages(kickabout.__path__, prefix="kickabout."):
        found.append(importlib.import_module(info.name))
    return found


def _own_callables(module: ModuleType) -> Iterator[object]:
    """Functions, classes and methods defined in ``module`` itself."""
    for name, obj in vars(module).items():
        if name.startswith("__") or getattr(obj, "__module__", None) != module.__name__:
            continue
        if inspect.isfunction(obj):
            yield obj
        elif inspect.isclass(obj):
            yield obj
            for attr, member in vars(obj).items():
                func = getattr(member, "__func__", member)
                if not attr.startswith("__") and inspect.isfunction(func) and func.__module__ == module.__name__:
                    yield func


def _returns_value(signature: inspect.Signature) -> bool:
    annotation = signature.return_annotation
    if annotation in (inspect.Signature.empty, None, type(None)):
        return False
    return not (isinstance(annotation, str) and annotation.strip() == "None")


def _label(obj: object) -> str:
    return f"{obj.__module__}.{obj.__qualname__}"


MODULES = _modules()
CALLABLES = [obj for module in MODULES for obj in _own_callables(module)]


@pytest.mark.parametrize("obj", CALLABLES, ids=_label)
def test_parameters_are_documented(obj: object) -> None:
    """Every named parameter, constructor arguments included, has a Parameters entry."""
    names = [
        p.name
        for p in inspect.signature(obj).parameters.values()
        if p.kind not in (p.VAR_POSITIONAL, p.VAR_KEYWORD) and p.name not in ("self", "cls")
    ]
    if not names:
        pytest.skip("no parameters")

    doc = inspect.getdoc(obj) or ""
    documented = {name for name, _, _ in NumpyDocString(doc)["Parameters"]}
    missing = [name for name in names if name not in documented]
    assert not missing, f"{_label(obj)} does not document: {', '.join(missing)}"


@pytest.mark.parametrize("obj", CALLABLES, ids=_label)
def test_returns_are_documented(obj: object) -> None:
    """A callable annotated to return a value has a Returns section."""
    if inspect.isclass(obj) or not _returns_value(inspect.signature(obj)):
        pytest.skip("returns nothing")
    assert NumpyDocString(inspect.getdoc(obj) or "")["Returns"], f"{_label(obj)} lacks a Returns section"


def test_subpackages_are_collected() -> None:
    """The walk reaches into every subpackage, not only top-level modules."""
    names = {module.__name__ for module in MODULES}
    assert {
        "kickabout.engine.match_engine",
        "kickabout.models.team",
        "kickabout.utils.roster",
        "kickabout.audio.cues",
        "kickabout.visualizer.scoreboard",
        "kickabout.main",
    } <= names


@pytest.mark.parametrize("module", MODULES, ids=lambda m: m.__name__)
def test_modules_have_docstrings(module: ModuleType) -> None:
    """Each module opens with a summary docstring."""
    assert inspect.getdoc(module), f"{module.__name__} has no docstring"
