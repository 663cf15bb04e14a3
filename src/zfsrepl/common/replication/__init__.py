from .endpoint import (
  Endpoint as Endpoint,
  EndpointKind as EndpointKind,
  Filesystem as Filesystem,
  InitialReplPolicy as InitialReplPolicy,
  ReceiveRequest as ReceiveRequest,
  SendRequest as SendRequest,
  DEFAULT_INITIAL_REPL_POLICY as DEFAULT_INITIAL_REPL_POLICY
)
from .puller import Puller as Puller
