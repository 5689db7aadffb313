"""Global configuration for pytest"""

import numpy as np
import pytest


@pytest.fixture(autouse=True, scope="session")
def numerical_exceptions():
    """
    Ensure any numerical errors raise an exception in our test suite.
    The uniform data is filled with numpy, and silent overflow or nan values
    there would go unnoticed.
    """
    np.seterr(all="raise")
