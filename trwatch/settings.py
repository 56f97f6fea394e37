from dataclasses import dataclass

import dacite
import yaml


@dataclass
class Data:
    rpc_url: str
    username: str | None = None
    password: str | None = None
    interval: float = 1.0
    timeout: float = 30.0
    log_path: str | None = None


def load_from_path(path: str) -> Data:
    with open(path, mode="r", encoding="utf-8") as fin:
        raw_data = yaml.safe_load(fin)

    # plain integers are accepted for the float fields
    data = dacite.from_dict(Data, raw_data, config=dacite.Config(cast=[float]))
    if data.interval <= 0:
        raise ValueError(f"invalid interval: {data.interval}")
    if data.timeout <= 0:
        raise ValueError(f"invalid timeout: {data.timeout}")
    return data
