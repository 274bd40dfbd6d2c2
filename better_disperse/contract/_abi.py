from ..utils.file import load_json
from .._paths import ABI_DIR


ERC20_ABI = load_json(ABI_DIR / "erc20.json")
