"""Shared test fixtures for Anchor Insight tests."""

import textwrap

import pytest

from anchor_insight.scanning.normalizer import TreeSitterNormalizer
from anchor_insight.scanning.syntax import FunctionDecl, SourceFile


@pytest.fixture(scope="session")
def normalizer():
    return TreeSitterNormalizer()


@pytest.fixture
def parse_rust(normalizer):
    """Parse a Rust snippet into a SourceFile."""

    def _parse(code: str, path: str = "lib.rs") -> SourceFile:
        return normalizer.parse_file(textwrap.dedent(code), path)

    return _parse


@pytest.fixture
def rust_fn(parse_rust):
    """Parse a snippet and return its first function."""

    def _first(code: str) -> FunctionDecl:
        return next(parse_rust(code).iter_functions())

    return _first


@pytest.fixture
def workspace(tmp_path):
    """Write files under a temporary workspace root and return the root."""

    def _write(files: dict):
        for rel, content in files.items():
            path = tmp_path / rel
            path.parent.mkdir(parents=True, exist_ok=True)
            if isinstance(content, bytes):
                path.write_bytes(content)
            else:
                path.write_text(textwrap.dedent(content), encoding="utf-8")
        return tmp_path

    return _write


_ANCHOR_PROGRAM = """
use anchor_lang::prelude::*;

declare_id!("Fg6PaFpoGXkYsidMpWTK6W2BeZ7FEfcYkg476zPFsLnS");

#[program]
pub mod vault {
    use super::*;

    pub fn initialize(ctx: Context<Initialize>, bump: u8) -> Result<()> {
        let vault = &mut ctx.accounts.vault;
        vault.bump = bump;
        vault.authority = ctx.accounts.authority.key();
        Ok(())
    }

    pub fn withdraw(ctx: Context<Withdraw>, amount: u64) -> Result<()> {
        if amount == 0 || amount > ctx.accounts.vault.balance {
            return err!(VaultError::InvalidAmount);
        }
        transfer_out(&ctx, amount)?;
        Ok(())
    }
}

fn transfer_out(ctx: &Context<Withdraw>, amount: u64) -> Result<()> {
    let vault = &mut ctx.accounts.vault;
    vault.balance = vault.balance.checked_sub(amount).ok_or(VaultError::Overflow)?;
    Ok(())
}

#[derive(Accounts)]
pub struct Withdraw<'info> {
    #[account(mut, has_one = authority)]
    pub vault: Account<'info, Vault>,
    pub authority: Signer<'info>,
}
"""


@pytest.fixture
def anchor_program():
    """A small Anchor program with two handlers and one helper."""
    return _ANCHOR_PROGRAM
