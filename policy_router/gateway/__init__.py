"""Reference gateway pipeline around the routing core.

Provides the three hook points a request gateway calls:
  - on entry: resolve the model and count the request
  - before dispatch: clamp sampling parameters under overload
  - on response: restore the client-facing virtual model id
"""
