from __future__ import annotations
from dateutil.relativedelta import relativedelta


UNITS = {'h', 'd', 'w', 'm', 'y'}


class DurationParseError(ValueError):
  def __init__(self, input: str, msg: str) -> None:
    super().__init__(f'Failed to parse duration "{input}": {msg}')


# input has format like 2y5m7d3h
def parse_duration(input: str) -> relativedelta:
  if not input:
    raise DurationParseError(input, 'Duration is empty')
  res: dict[str, int] = dict()
  start = 0

  for i, c in enumerate(input):
    if c not in UNITS:
      continue
    num = input[start:i]
    start = i+1
    if not num:
      raise DurationParseError(input, f'Unit "{c}" is without number')
    if c in res:
      raise DurationParseError(input, f'Duplicate unit "{c}"')
    try:
      res[c] = int(num)
    except ValueError:
      raise DurationParseError(input, f'Invalid number "{num}"')

  if not start == len(input):
    raise DurationParseError(input, f'Number "{input[start:]}" is without unit')

  return relativedelta(
    years=res.get('y', 0),
    months=res.get('m', 0),
    weeks=res.get('w', 0),
    days=res.get('d', 0),
    hours=res.get('h', 0)
  )
