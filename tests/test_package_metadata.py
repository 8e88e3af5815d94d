import p4watch


def test_public_exports_resolve():
    for name in p4watch.__all__:
        assert hasattr(p4watch, name), name


def test_version_is_set():
    assert p4watch.__version__
