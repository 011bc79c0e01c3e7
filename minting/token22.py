"""
minting/token22.py

Token-2022 fixture tokens.

- ExtensionGroupIssuer: supply-1 group mint (group pointer + token group)
- ExtensionMemberIssuer: supply-1 member mints bound to a group
- FungibleExtensionIssuer: fungible mints with optional close / delegate /
  metadata pointer extensions

Group and member mints are built in ONE transaction, in this order:
1. compute budget, create the mint account sized for its extensions
2. pointer extensions (must precede InitializeMint)
3. InitializeMint
4. InitializeGroup / InitializeMember
5. rent top-up + embedded token metadata
6. optional hand-over of freeze and group / member pointer authority
7. destination ATA, mint 1 unit, revoke mint authority
"""
import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import List, Optional, Sequence

from solders.compute_budget import set_compute_unit_limit
from solders.instruction import Instruction
from solders.keypair import Keypair
from solders.pubkey import Pubkey
from solders.signature import Signature
from solders.system_program import CreateAccountParams, TransferParams, create_account, transfer
from spl.token.instructions import (
    AuthorityType,
    InitializeMintParams,
    MintToParams,
    SetAuthorityParams,
    create_associated_token_account,
    get_associated_token_address,
    initialize_mint,
    mint_to,
    set_authority,
)

from solana.rpc.commitment import Confirmed

from execution.transaction_sender import SendOptions, TransactionSender
from programs import token_extensions as ext
from programs.ids import TOKEN_2022_PROGRAM_ID
from programs.token_extensions import ExtensionAuthorityType, ExtensionType

logger = logging.getLogger(__name__)


COMPUTE_UNIT_LIMIT = 500_000
GROUP_MAX_SIZE = 1000
FUNGIBLE_DECIMALS = 6

# pointer extensions whose authority moves with final_authority
POINTER_AUTHORITIES = (
    (ExtensionType.GROUP_POINTER, ExtensionAuthorityType.GROUP_POINTER),
    (ExtensionType.GROUP_MEMBER_POINTER, ExtensionAuthorityType.GROUP_MEMBER_POINTER),
)


@dataclass(frozen=True)
class TokenMetadataParams:
    name: str
    symbol: str
    uri: str


@dataclass(frozen=True)
class GroupRef:
    """An existing group mint and the signer allowed to add members to it."""
    group_address: Pubkey
    update_authority: Keypair


@dataclass(frozen=True)
class Token22MintResult:
    mint: Keypair
    token_account: Pubkey
    signature: Signature


class _ExtensionMintIssuer(ABC):
    """Shared pipeline of group and member mints."""

    label = "token22"

    def __init__(
        self,
        sender: TransactionSender,
        payer: Keypair,
        authority: Optional[Keypair] = None,
        options: SendOptions = SendOptions(),
    ):
        self._sender = sender
        self._payer = payer
        self._authority = authority or payer
        self._options = options

    @abstractmethod
    def _extensions(self) -> List[ExtensionType]:
        pass

    @abstractmethod
    def _pointer_instructions(self, mint: Pubkey) -> List[Instruction]:
        pass

    @abstractmethod
    def _post_mint_init_instructions(self, mint: Pubkey) -> List[Instruction]:
        pass

    def _extra_signers(self) -> List[Keypair]:
        return []

    def build_instructions(
        self,
        mint: Pubkey,
        beneficiary: Pubkey,
        data: TokenMetadataParams,
        mint_lamports: int,
        metadata_lamports: int,
        final_authority: Optional[Pubkey] = None,
    ) -> List[Instruction]:
        authority = self._authority.pubkey()
        payer = self._payer.pubkey()
        token_account = get_associated_token_address(beneficiary, mint, TOKEN_2022_PROGRAM_ID)

        instructions: List[Instruction] = [
            set_compute_unit_limit(COMPUTE_UNIT_LIMIT),
            create_account(CreateAccountParams(
                from_pubkey=payer,
                to_pubkey=mint,
                lamports=mint_lamports,
                space=ext.get_mint_len(self._extensions()),
                owner=TOKEN_2022_PROGRAM_ID,
            )),
        ]
        instructions.extend(self._pointer_instructions(mint))
        instructions.append(initialize_mint(InitializeMintParams(
            decimals=0,
            program_id=TOKEN_2022_PROGRAM_ID,
            mint=mint,
            mint_authority=authority,
            freeze_authority=authority,
        )))
        instructions.extend(self._post_mint_init_instructions(mint))
        instructions.append(transfer(TransferParams(
            from_pubkey=payer,
            to_pubkey=mint,
            lamports=metadata_lamports,
        )))
        instructions.append(ext.initialize_token_metadata(
            metadata=mint,
            update_authority=authority,
            mint=mint,
            mint_authority=authority,
            name=data.name,
            symbol=data.symbol,
            uri=data.uri,
        ))
        if final_authority is not None:
            instructions.append(set_authority(SetAuthorityParams(
                program_id=TOKEN_2022_PROGRAM_ID,
                account=mint,
                authority=AuthorityType.FREEZE_ACCOUNT,
                current_authority=authority,
                new_authority=final_authority,
            )))
            extensions = self._extensions()
            for extension, authority_type in POINTER_AUTHORITIES:
                if extension in extensions:
                    instructions.append(ext.set_authority(
                        account=mint,
                        current_authority=authority,
                        authority_type=authority_type,
                        new_authority=final_authority,
                    ))
        instructions.extend([
            create_associated_token_account(payer, beneficiary, mint, TOKEN_2022_PROGRAM_ID),
            mint_to(MintToParams(
                program_id=TOKEN_2022_PROGRAM_ID,
                mint=mint,
                dest=token_account,
                mint_authority=authority,
                amount=1,
            )),
            set_authority(SetAuthorityParams(
                program_id=TOKEN_2022_PROGRAM_ID,
                account=mint,
                authority=AuthorityType.MINT_TOKENS,
                current_authority=authority,
                new_authority=None,
            )),
        ])
        return instructions

    async def _issue(
        self,
        data: TokenMetadataParams,
        beneficiary: Pubkey,
        final_authority: Optional[Pubkey] = None,
    ) -> Token22MintResult:
        mint = Keypair()
        mint_len = ext.get_mint_len(self._extensions())
        metadata_len = len(ext.pack_token_metadata(
            mint=mint.pubkey(),
            name=data.name,
            symbol=data.symbol,
            uri=data.uri,
            update_authority=self._authority.pubkey(),
        ))
        mint_lamports = await self._sender.get_minimum_balance_for_rent_exemption(mint_len)
        metadata_lamports = await self._sender.get_minimum_balance_for_rent_exemption(metadata_len)

        instructions = self.build_instructions(
            mint.pubkey(),
            beneficiary,
            data,
            mint_lamports,
            metadata_lamports,
            final_authority=final_authority,
        )
        signature = await self._sender.send_and_confirm(
            instructions,
            [self._payer, self._authority, mint, *self._extra_signers()],
            options=self._options,
            label=self.label,
        )
        token_account = get_associated_token_address(beneficiary, mint.pubkey(), TOKEN_2022_PROGRAM_ID)
        return Token22MintResult(mint=mint, token_account=token_account, signature=signature)


class ExtensionGroupIssuer(_ExtensionMintIssuer):
    """Creates group mints; the authority becomes the group update authority."""

    label = "create_token22_group"

    def _extensions(self) -> List[ExtensionType]:
        return [ExtensionType.GROUP_POINTER, ExtensionType.METADATA_POINTER]

    def _pointer_instructions(self, mint: Pubkey) -> List[Instruction]:
        authority = self._authority.pubkey()
        return [
            ext.initialize_group_pointer(mint, authority, mint),
            ext.initialize_metadata_pointer(mint, authority, mint),
        ]

    def _post_mint_init_instructions(self, mint: Pubkey) -> List[Instruction]:
        authority = self._authority.pubkey()
        return [
            ext.initialize_group(
                group=mint,
                mint=mint,
                mint_authority=authority,
                update_authority=authority,
                max_size=GROUP_MAX_SIZE,
            ),
        ]

    async def create_group(
        self,
        data: TokenMetadataParams,
        beneficiary: Pubkey,
        final_authority: Optional[Pubkey] = None,
    ) -> Token22MintResult:
        result = await self._issue(data, beneficiary, final_authority)
        logger.info(f"[token22] Created group {result.mint.pubkey()}")
        return result

    def group_ref(self, result: Token22MintResult) -> GroupRef:
        return GroupRef(group_address=result.mint.pubkey(), update_authority=self._authority)


class ExtensionMemberIssuer(_ExtensionMintIssuer):
    """
    Creates supply-1 mints, members of `group` when one is given.

    The group update authority co-signs InitializeMember.
    """

    label = "mint_token22_member"

    def __init__(
        self,
        sender: TransactionSender,
        payer: Keypair,
        group: Optional[GroupRef] = None,
        authority: Optional[Keypair] = None,
        options: SendOptions = SendOptions(),
    ):
        super().__init__(sender, payer, authority=authority, options=options)
        self._group = group

    def _extensions(self) -> List[ExtensionType]:
        extensions = [ExtensionType.METADATA_POINTER]
        if self._group is not None:
            extensions.append(ExtensionType.GROUP_MEMBER_POINTER)
        return extensions

    def _pointer_instructions(self, mint: Pubkey) -> List[Instruction]:
        authority = self._authority.pubkey()
        instructions = [ext.initialize_metadata_pointer(mint, authority, mint)]
        if self._group is not None:
            instructions.append(ext.initialize_group_member_pointer(mint, authority, mint))
        return instructions

    def _post_mint_init_instructions(self, mint: Pubkey) -> List[Instruction]:
        if self._group is None:
            return []
        return [
            ext.initialize_member(
                member=mint,
                member_mint=mint,
                member_mint_authority=self._authority.pubkey(),
                group=self._group.group_address,
                group_update_authority=self._group.update_authority.pubkey(),
            ),
        ]

    def _extra_signers(self) -> List[Keypair]:
        return [self._group.update_authority] if self._group is not None else []

    async def mint_member(
        self,
        data: TokenMetadataParams,
        beneficiary: Pubkey,
        final_authority: Optional[Pubkey] = None,
    ) -> Token22MintResult:
        result = await self._issue(data, beneficiary, final_authority)
        logger.debug(f"[token22] Minted {data.name} ({result.mint.pubkey()}) to {beneficiary}")
        return result


class FungibleExtensionIssuer:
    """
    Fungible Token-2022 mints with embedded metadata.

    Supported extensions: MINT_CLOSE_AUTHORITY, PERMANENT_DELEGATE,
    METADATA_POINTER.
    """

    SUPPORTED = (
        ExtensionType.MINT_CLOSE_AUTHORITY,
        ExtensionType.PERMANENT_DELEGATE,
        ExtensionType.METADATA_POINTER,
    )

    def __init__(
        self,
        sender: TransactionSender,
        payer: Keypair,
        authority: Optional[Keypair] = None,
        options: SendOptions = SendOptions(commitment=Confirmed),
    ):
        self._sender = sender
        self._payer = payer
        self._authority = authority or payer
        self._options = options

    def build_create_instructions(
        self,
        mint: Pubkey,
        extensions: Sequence[ExtensionType],
        data: TokenMetadataParams,
        lamports: int,
    ) -> List[Instruction]:
        unsupported = [e for e in extensions if e not in self.SUPPORTED]
        if unsupported:
            raise ValueError(f"Unsupported extensions: {[e.name for e in unsupported]}")
        authority = self._authority.pubkey()

        instructions: List[Instruction] = [
            create_account(CreateAccountParams(
                from_pubkey=self._payer.pubkey(),
                to_pubkey=mint,
                lamports=lamports,
                space=ext.get_mint_len(extensions),
                owner=TOKEN_2022_PROGRAM_ID,
            )),
        ]
        if ExtensionType.MINT_CLOSE_AUTHORITY in extensions:
            instructions.append(ext.initialize_mint_close_authority(mint, authority))
        if ExtensionType.PERMANENT_DELEGATE in extensions:
            instructions.append(ext.initialize_permanent_delegate(mint, authority))
        if ExtensionType.METADATA_POINTER in extensions:
            instructions.append(ext.initialize_metadata_pointer(mint, authority, mint))
        instructions.append(initialize_mint(InitializeMintParams(
            decimals=FUNGIBLE_DECIMALS,
            program_id=TOKEN_2022_PROGRAM_ID,
            mint=mint,
            mint_authority=authority,
            freeze_authority=authority,
        )))
        if ExtensionType.METADATA_POINTER in extensions:
            instructions.append(ext.initialize_token_metadata(
                metadata=mint,
                update_authority=authority,
                mint=mint,
                mint_authority=authority,
                name=data.name,
                symbol=data.symbol,
                uri=data.uri,
            ))
        return instructions

    async def create_mint(
        self,
        extensions: Sequence[ExtensionType],
        data: TokenMetadataParams,
    ) -> Keypair:
        """Create a fungible mint; rent covers the mint plus its metadata TLV entry."""
        mint = Keypair()
        metadata_len = ext.TYPE_SIZE + ext.LENGTH_SIZE + len(ext.pack_token_metadata(
            mint=mint.pubkey(),
            name=data.name,
            symbol=data.symbol,
            uri=data.uri,
            update_authority=self._authority.pubkey(),
        ))
        lamports = await self._sender.get_minimum_balance_for_rent_exemption(
            ext.get_mint_len(extensions) + metadata_len
        )
        await self._sender.send_and_confirm(
            self.build_create_instructions(mint.pubkey(), extensions, data, lamports),
            [self._payer, self._authority, mint],
            options=self._options,
            label="create_token22_fungible",
        )
        logger.info(f"[token22] Created fungible mint {mint.pubkey()}")
        return mint

    def build_mint_and_revoke_instructions(
        self,
        mint: Pubkey,
        amount: int,
        extensions: Sequence[ExtensionType],
    ) -> List[Instruction]:
        authority = self._authority.pubkey()
        owner = self._payer.pubkey()
        token_account = get_associated_token_address(owner, mint, TOKEN_2022_PROGRAM_ID)
        instructions: List[Instruction] = [
            create_associated_token_account(owner, owner, mint, TOKEN_2022_PROGRAM_ID),
            mint_to(MintToParams(
                program_id=TOKEN_2022_PROGRAM_ID,
                mint=mint,
                dest=token_account,
                mint_authority=authority,
                amount=amount,
            )),
        ]
        if ExtensionType.PERMANENT_DELEGATE in extensions:
            instructions.append(ext.set_authority(
                mint, authority, ExtensionAuthorityType.PERMANENT_DELEGATE, None,
            ))
        if ExtensionType.MINT_CLOSE_AUTHORITY in extensions:
            instructions.append(ext.set_authority(
                mint, authority, ExtensionAuthorityType.CLOSE_MINT, None,
            ))
        instructions.append(set_authority(SetAuthorityParams(
            program_id=TOKEN_2022_PROGRAM_ID,
            account=mint,
            authority=AuthorityType.FREEZE_ACCOUNT,
            current_authority=authority,
            new_authority=None,
        )))
        return instructions

    async def mint_and_revoke(
        self,
        mint: Pubkey,
        amount: int,
        extensions: Sequence[ExtensionType] = SUPPORTED,
    ) -> Signature:
        """Mint `amount` base units to the payer, then drop the optional authorities."""
        return await self._sender.send_and_confirm(
            self.build_mint_and_revoke_instructions(mint, amount, extensions),
            [self._payer, self._authority],
            options=SendOptions(skip_preflight=True, commitment=Confirmed),
            label="mint_token22_fungible",
        )
