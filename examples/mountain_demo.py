#!/usr/bin/env python3
"""
Simple demo script showing mountain world generation.
"""

from py_mountain.core import generate_world


def main():
    """Generate a world and print its features."""
    print("Py-Mountain World Generation Demo")
    print("=" * 40)

    world = generate_world(seed="demo123")
    summary = world.summary()
    print(f"\nSeed: {summary['seed']}  Size: {summary['size']}x{summary['size']}")
    print(f"Height range: {summary['min_height']:.3f} - {summary['max_height']:.3f}")

    print("\nLakes:")
    print("-" * 30)
    for lake in world.lakes:
        print(f"  {lake.name:<20} ({lake.x:3d}, {lake.y:3d})  {lake.shape.value}")

    print("\nPeaks:")
    print("-" * 30)
    for peak in world.peaks:
        print(f"  {peak.name:<20} ({peak.x:3d}, {peak.y:3d})  {peak.elevation_feet} ft")

    print("\nCampsites:")
    print("-" * 30)
    for settlement in world.settlements:
        print(f"  {settlement.name:<20} {settlement.elevation} ft")

    if len(world.settlements) >= 2:
        route = world.plan_route(world.settlements[0], world.settlements[1])
        kind = "direct" if route.direct else "trail"
        print(f"\nRoute {route.origin} -> {route.destination}: {route.miles} mi ({kind})")

    print("\nDay hikes:")
    print("-" * 30)
    for hike in world.day_hikes():
        print(f"  {hike.name} ({hike.kind}, {hike.miles} mi)")


if __name__ == "__main__":
    main()
