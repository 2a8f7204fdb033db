import os
from functools import partial

import typeguard

_NO_TYPE_CHECK_ENV = "TXBALANCER_NO_TYPE_CHECK"


def _type_check_disabled() -> bool:
    return os.getenv(_NO_TYPE_CHECK_ENV, "False").lower() in ("true", "1")


def typechecked(func=None, *args, **kwargs):
    if _type_check_disabled():
        if func is None:
            return partial(typechecked, *args, **kwargs)
        return func
    return typeguard.typechecked(func, *args, **kwargs)


def check_type(*args, **kwargs):
    if _type_check_disabled():
        return None
    return typeguard.check_type(*args, **kwargs)
