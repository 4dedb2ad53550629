"""Export surface for paddock.views.

Endpoints live in submodules by concern:
- paddock.views.accounts
- paddock.views.driver
- paddock.views.review
"""

from .accounts import *  # noqa: F401,F403
from .driver import *  # noqa: F401,F403
from .review import *  # noqa: F401,F403
