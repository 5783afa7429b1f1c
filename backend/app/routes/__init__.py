# Application routes live in v1/
from . import v1 as v1
