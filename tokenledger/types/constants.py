# tokenledger/types/constants.py

from .new import EvmHash, HexStr

# ERC-20 / ERC-721 Transfer(address,address,uint256)
TRANSFER_SIGNATURE = EvmHash("0xddf252ad1be2c89b69c2b068fc378daa952ba7f163c4a11628f55a4df523b3ef")
WETH_DEPOSIT_SIGNATURE = EvmHash("0xe1fffcc4923d04b559f4d29a8bfc6cda04eb5b0d3c460751c2402c5c5cc9109c")
WETH_WITHDRAWAL_SIGNATURE = EvmHash("0x7fcf532c15f0a6db0bd6d0e038bea71d30d808c7d98cb3bf7268a95bf5081b65")
ERC1155_SINGLE_TRANSFER_SIGNATURE = EvmHash("0xc3d58168c5ae7397731d063d5bbf3d657854427343f4c083240f7aacaa2d0f62")
ERC1155_BATCH_TRANSFER_SIGNATURE = EvmHash("0x4a39dc06d4c0dbc64b70af90fd698a233a518aa5d07e595d983b8c0526c8f7fb")
ERC404_ERC20_TRANSFER_EVENT = EvmHash("0xe59fdd36d0d223c0c7d996db7ad796880f45e1936cb0bb7ac102e7082e031487")
ERC404_ERC721_TRANSFER_EVENT = EvmHash("0xe5f815dc84b8cecdfd4beedfc3f91ab5be7af100eca4e8fb11552b867995394f")

# transfer(address,uint256)
TRANSFER_FUNCTION_SIGNATURE = HexStr("0xa9059cbb")

# Signatures whose logs must each have a derived token transfer row
KNOWN_TRANSFER_SIGNATURES = (
    TRANSFER_SIGNATURE,
    WETH_DEPOSIT_SIGNATURE,
    WETH_WITHDRAWAL_SIGNATURE,
    ERC1155_SINGLE_TRANSFER_SIGNATURE,
    ERC1155_BATCH_TRANSFER_SIGNATURE,
)

DEFAULT_PAGE_SIZE = 50
