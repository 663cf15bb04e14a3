from . import args as args
from .args import Args as Args
from .entrypoint import entrypoint as entrypoint
