import pytest

from models import LoaderContext, LoaderEntry


@pytest.fixture()
def loader_context() -> LoaderContext:
    """A three-loader chain currently running the middle loader."""
    return LoaderContext(
        resource_path="/app/src/index.css",
        resource="/app/src/index.css?inline",
        context="/app/src",
        query="?modules=true&config=cssConfig",
        options={"cssConfig": {"modules": False, "sourceMap": True}},
        loaders=[
            LoaderEntry(request="/loaders/style.js"),
            LoaderEntry(request="/loaders/css.js?modules"),
            LoaderEntry(request="/loaders/postcss.js"),
        ],
        loader_index=1,
    )
