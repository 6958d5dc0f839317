from pathlib import Path
from tempfile import NamedTemporaryFile
from typing import Iterator, List, Union

import pytest
import yaml

from sqlpool.configuration import read_configuration

HERE = Path(__file__).parent
EXAMPLE_CONFIG = HERE.parent / "etc" / "sqlpool-example-config.yaml"

# Configuration fixtures


def pytest_configure(config):
    config.addinivalue_line("markers", "sqlpool_config")


@pytest.fixture
def sqlpool_config_files(
    request: pytest.FixtureRequest, tmp_path: Path
) -> Iterator[List[Union[Path, str]]]:
    """Fixture to create testing configuration files.

    This is useful mainly to the sqlpool_config fixture which is applied
    universally, unless you need access to the actual configuration
    files.

    Use `@pytest.mark.sqlpool_config()` to affect their content(s), e.g.:

        TEST_CONFIG = {...}

        @pytest.mark.sqlpool_config(TEST_CONFIG)
        def test_something(sqlpool_config_files):
            # sqlpool_config_files is a list containing 1 Path object
            # pointing to the temporary configuration file initialized
            # from TEST_CONFIG
            ...
    """
    configs = []

    EXAMPLE_CONFIG_SENTINEL = object()

    # request.node.iter_markers() lists markers of parent objects later, we need them early to make
    # e.g. markers on the method override those on the class.
    for node in request.node.listchain():
        for marker in node.own_markers:
            if marker.name == "sqlpool_config":
                if marker.kwargs.get("clear"):
                    configs = []
                objtype = marker.kwargs.get("objtype", Path)
                assert objtype in (Path, str)
                if marker.kwargs.get("example_config"):
                    configs.append((objtype, EXAMPLE_CONFIG_SENTINEL))
                for content in marker.args:
                    assert any(isinstance(content, t) for t in (dict, str))
                    configs.append((objtype, content))

    config_file_paths = []
    for objtype, content in configs:
        if content is EXAMPLE_CONFIG_SENTINEL:
            config_file_paths.append(EXAMPLE_CONFIG.absolute())
            continue

        config_file_obj = NamedTemporaryFile(
            mode="w",
            encoding="utf-8",
            suffix=".yaml",
            prefix="tmp_sqlpool_test_config",
            dir=tmp_path,
            delete=False,
        )
        if isinstance(content, dict):
            yaml.dump(content, stream=config_file_obj)
        else:
            print(content, file=config_file_obj)
        config_file_obj.close()
        config_file_paths.append(objtype(config_file_obj.name))

    yield config_file_paths


@pytest.fixture(autouse=True)
def sqlpool_config(sqlpool_config_files):
    """Fixture to apply temporary configuration files in tests.

    This loads the configuration files which are specified using
    @pytest.mark.sqlpool_config(...) (see sqlpool_config_files) and applies
    them in sqlpool.configuration.config.
    """
    read_configuration(*sqlpool_config_files, clear=True)
