#!/usr/bin/env python3
"""
Complete Pipeline Demo: Sizes → Fluid Scales → Size Sheet → Diagnostics

Shows the full workflow:
1. Size arithmetic through a SizeContext
2. Fluid typography and modular scales
3. A SizeManager driving a generated sheet
4. Engine diagnostics
"""

import asyncio
import logging

from sizekit.context import SizeContext
from sizekit.diagnostics import analyze_context, format_report
from sizekit.fluid import DeviceClass, FluidSizeCalculator, StaticViewportSource, Viewport
from sizekit.manager import SizeManager
from sizekit.model import MemoryStorage, MemoryStyleTarget


async def main():
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")
    context = SizeContext()

    print("=" * 80)
    print("COMPLETE PIPELINE DEMO: Sizes → Fluid → Sheet → Diagnostics")
    print("=" * 80)

    # =========================================================================
    # STEP 1: Size arithmetic
    # =========================================================================
    print("\n1. SIZE ARITHMETIC...")
    total = context.size(16).add(16)
    print(f"   ✓ 16 + 16          = {total}")
    print(f"   ✓ 16px in rem      = {context.size(16).to_rem().value}rem")
    print(f"   ✓ 1rem + 8px       = {context.rem(1) + '8px'}")
    print(f"   ✓ clamp(50, 1rem, 2rem) = {context.px(50).clamp('1rem', '2rem')}")
    total.dispose()

    # =========================================================================
    # STEP 2: Fluid typography
    # =========================================================================
    print("\n2. FLUID TYPOGRAPHY...")
    viewport = StaticViewportSource(Viewport(1440, 900, DeviceClass.DESKTOP))
    calculator = FluidSizeCalculator(viewport, context=context)
    for preset in ("h1", "h2", "body"):
        print(f"   ✓ {preset:<5} {calculator.fluid_text(preset)}")
    print(f"   ✓ scale  {', '.join(calculator.modular_scale(1, 'major_third', 3))}")

    # =========================================================================
    # STEP 3: Size manager
    # =========================================================================
    print("\n3. SIZE MANAGER...")
    target = MemoryStyleTarget()
    storage = MemoryStorage()
    manager = SizeManager(storage=storage, style_target=target)
    manager.subscribe(lambda config: print(f"   ✓ listener saw base size {config.base_size}px"))
    manager.apply_preset("compact")
    manager.apply_preset("spacious")
    await manager.drain()

    lines = target.css.split("\n")
    for line in lines[:12]:
        print(f"   {line}")
    print(f"   ... ({len(lines) - 12} more lines)")
    print(f"   ✓ stored: {storage.items[manager.storage_key]}")

    # =========================================================================
    # STEP 4: Diagnostics
    # =========================================================================
    print("\n4. DIAGNOSTICS:")
    print("-" * 80)
    print(format_report(analyze_context(context, calculator=calculator, manager=manager)))

    calculator.destroy()
    manager.destroy()

    print("\n" + "=" * 80)
    print("✓ PIPELINE COMPLETE")
    print("=" * 80)


if __name__ == "__main__":
    asyncio.run(main())
