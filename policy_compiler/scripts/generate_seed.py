"""
Generate Seed Script
Builds the configured preset policy, validates it and writes the compiled SQL
to a file that the database tooling applies.
"""

import sys
import logging
from pathlib import Path

from policy_compiler.config.presets import build_preset
from policy_compiler.config.settings import settings
from policy_compiler.core.exceptions import PolicyCompilerError

logger = logging.getLogger(__name__)


def generate_seed(template: str, output_path: str, root_account_id=None, strict: bool = True) -> Path:
    """Compile a preset and write it to output_path"""
    logger.info(f"Building '{template}' policy...")
    registry = build_preset(template, root_account_id)

    if strict:
        registry.validate()
        logger.info("Policy graph validated")

    script = registry.to_script()

    path = Path(output_path)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(script, encoding="utf-8")

    logger.info(
        f"Seed written to {path}: {len(registry.permissions())} permissions, "
        f"{len(registry.permission_groups())} groups, {len(registry.roles())} roles, "
        f"{len(registry.accounts())} accounts"
    )
    return path


def main():
    """Main function to generate the seed file"""
    logging.basicConfig(
        level=getattr(logging, settings.log_level.upper(), logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%SZ",
    )

    try:
        generate_seed(
            settings.seed_template,
            settings.output_path,
            root_account_id=settings.root_account_id,
            strict=settings.strict_validation,
        )
        logger.info("Seed generation completed successfully!")
    except PolicyCompilerError as e:
        logger.error(f"Error during seed generation: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
