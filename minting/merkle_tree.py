"""
minting/merkle_tree.py

Concurrent Merkle tree provisioning for compressed NFTs.
"""
import logging
from dataclasses import dataclass
from typing import Optional

from solders.keypair import Keypair
from solders.pubkey import Pubkey
from solders.signature import Signature
from solders.system_program import CreateAccountParams, create_account

from execution.transaction_sender import PROVISIONING_OPTIONS, SendOptions, TransactionSender
from programs import bubblegum
from programs.account_compression import DEFAULT_TREE_CONFIG, TreeConfig
from programs.ids import ACCOUNT_COMPRESSION_PROGRAM_ID
from programs.pda import find_tree_authority_pda

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class MerkleTree:
    address: Pubkey
    authority_pda: Pubkey
    capacity: int
    tree_creator: Pubkey
    config: TreeConfig
    signature: Optional[Signature] = None


class MerkleTreeProvisioner:
    """
    Creates concurrent Merkle tree accounts and their Bubblegum tree config.

    Each call uses a freshly generated tree keypair; a failed attempt is not
    reused, callers retry with a new address.
    """

    def __init__(
        self,
        sender: TransactionSender,
        payer: Keypair,
        options: SendOptions = PROVISIONING_OPTIONS,
    ):
        self._sender = sender
        self._payer = payer
        self._options = options

    async def create_tree(
        self,
        config: TreeConfig = DEFAULT_TREE_CONFIG,
        tree_creator: Optional[Keypair] = None,
    ) -> MerkleTree:
        """
        Allocate and initialize a new tree.

        Args:
            config: Depth / buffer / canopy of the tree
            tree_creator: Tree owner signing the config creation (defaults to payer)

        Returns:
            MerkleTree ready to receive appends
        """
        creator = tree_creator or self._payer
        tree_keypair = Keypair()
        tree = tree_keypair.pubkey()
        authority_pda, _ = find_tree_authority_pda(tree)

        space = config.account_size
        lamports = await self._sender.get_minimum_balance_for_rent_exemption(space)

        instructions = [
            create_account(CreateAccountParams(
                from_pubkey=self._payer.pubkey(),
                to_pubkey=tree,
                lamports=lamports,
                space=space,
                owner=ACCOUNT_COMPRESSION_PROGRAM_ID,
            )),
            bubblegum.create_tree(
                merkle_tree=tree,
                payer=self._payer.pubkey(),
                tree_creator=creator.pubkey(),
                max_depth=config.max_depth,
                max_buffer_size=config.max_buffer_size,
                public=False,
            ),
        ]

        logger.debug(
            f"[tree] Creating tree {tree} depth={config.max_depth} "
            f"buffer={config.max_buffer_size} canopy={config.canopy_depth} space={space}"
        )
        signature = await self._sender.send_and_confirm(
            instructions,
            [self._payer, tree_keypair, creator],
            options=self._options,
            label="create_tree",
        )
        logger.info(f"[tree] Created tree {tree} (capacity {config.capacity})")

        return MerkleTree(
            address=tree,
            authority_pda=authority_pda,
            capacity=config.capacity,
            tree_creator=creator.pubkey(),
            config=config,
            signature=signature,
        )
