import importlib
import pkgutil

import pytest

import prep_admin

MODULES = sorted(
    info.name for info in pkgutil.walk_packages(prep_admin.__path__, prefix="prep_admin.")
)


@pytest.mark.parametrize("name", MODULES)
def test_module_imports(name: str) -> None:
    importlib.import_module(name)


def test_document_store_methods_shadowing_builtins() -> None:
    from prep_admin.services.document_store import DocumentStore, Transaction

    assert callable(DocumentStore.list)
    assert callable(Transaction.list)
