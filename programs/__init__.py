"""
programs package

Instruction builders, account sizing and PDA derivation for the on-chain
programs the fixture minter talks to.
"""
