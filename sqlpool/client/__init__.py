from .formatter import SqlPoolFormatter  # noqa: F401
from .main import SqlManagementClient  # noqa: F401
