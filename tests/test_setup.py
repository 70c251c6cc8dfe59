"""Test to verify pytest setup is working correctly."""


def test_basic_setup():
    """Verify basic test setup works."""
    assert True


def test_import_mook():
    """Verify we can import the mook package and its public API."""
    import mook

    assert mook is not None
    assert callable(mook.hook)
    assert callable(mook.unhook)


def test_python_version():
    """Verify Python version is 3.8+."""
    import sys

    assert sys.version_info >= (3, 8)
