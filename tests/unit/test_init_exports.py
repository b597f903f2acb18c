from __future__ import annotations

import pytest

import ddbjson


def test_init_exposes_lazy_exports_via_getattr() -> None:
    assert ddbjson._normalize_repo_version("1.2.3") == "1.2.3"
    assert ddbjson._normalize_repo_version("1.2.3-rc.4") == "1.2.3rc4"

    assert callable(ddbjson.Client)
    assert callable(ddbjson.ClientConfig)
    assert callable(ddbjson.GetItemRequest)
    assert callable(ddbjson.BatchWriteItemResult)
    assert callable(ddbjson.TableDescription)
    assert callable(ddbjson.wait_for_table_active)
    assert callable(ddbjson.SigV4Signer)


def test_all_names_resolve() -> None:
    for name in ddbjson.__all__:
        assert getattr(ddbjson, name) is not None


def test_unknown_attribute_raises() -> None:
    with pytest.raises(AttributeError):
        _ = ddbjson.DoesNotExist  # type: ignore[attr-defined]
