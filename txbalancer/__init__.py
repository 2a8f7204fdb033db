# flake8: noqa

from .address import *
from .backend import *
from .balance import *
from .coinselection import *
from .collateral import *
from .exception import *
from .hash import *
from .key import *
from .network import *
from .result import *
from .serialization import *
from .transaction import *
from .wallet import *
