# main.py
# Entry point: resolves a destination, then replays a GPS trace into a session.
# In production, replace the playback with your real location feed.

import argparse
import logging
import sys
import time
from typing import List, Optional

from .address_resolver import AddressResolver
from .dispatch import ThreadedDispatcher
from .location import LocationFeed, TracePlayback
from .models import AuthorizationStatus, Coord, SessionState, StepStyle, UnitSystem
from .nav_config import NavConfig
from .navigation_session import NavigationSession
from .providers import NominatimProvider, OSRMRoutingProvider

logger = logging.getLogger(__name__)


def _print_steps(session: NavigationSession) -> None:
    print(f"  Total: {session.total_distance_text}")
    for row in session.display_steps():
        marker = "▶" if row.style is StepStyle.BOLD else " "
        print(f"  {marker} [{row.index}] {row.instruction} ({row.distance_text})")


def _parse_args(argv: Optional[List[str]]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Turn-by-turn route progress over a recorded GPS trace"
    )
    parser.add_argument("destination", nargs="?",
                        help="Destination address (geocoded when no --dest-lat/--dest-lon)")
    parser.add_argument("--dest-lat", type=float, help="Destination latitude")
    parser.add_argument("--dest-lon", type=float, help="Destination longitude")
    parser.add_argument("--lat", type=float, help="Starting latitude")
    parser.add_argument("--lon", type=float, help="Starting longitude")
    parser.add_argument("--trace", metavar="FILE", help="GPS trace JSON to replay")
    parser.add_argument("--speed", type=float, default=1.0,
                        help="Playback speed multiplier (default: 1.0)")
    parser.add_argument("--imperial", action="store_true", help="Show distances in miles")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    args = parser.parse_args(argv)

    if (args.dest_lat is None) != (args.dest_lon is None):
        parser.error("--dest-lat and --dest-lon must be used together")
    if args.destination is None and args.dest_lat is None:
        parser.error("give a destination address or --dest-lat/--dest-lon")
    if (args.lat is None) != (args.lon is None):
        parser.error("--lat and --lon must be used together")
    if args.lat is None and args.trace is None:
        parser.error("give a starting --lat/--lon or a --trace")
    return args


def main(argv: Optional[List[str]] = None) -> int:
    args = _parse_args(argv)

    # ------------------------------------------------------------------
    # Logging setup: configure once here, all modules inherit
    # ------------------------------------------------------------------
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%H:%M:%S",
    )

    config = NavConfig.from_env()
    if args.imperial:
        config.unit_system = UnitSystem.IMPERIAL

    dispatcher = ThreadedDispatcher()
    places = NominatimProvider(config)
    resolver = AddressResolver(places, places, config=config, dispatcher=dispatcher)
    session = NavigationSession(OSRMRoutingProvider(config), config=config,
                                dispatcher=dispatcher, resolver=resolver)
    session.subscribe(lambda event, payload: logger.debug(f"event {event}: {payload}"))

    # 1. Location feed
    feed = LocationFeed(AuthorizationStatus.AUTHORIZED_WHEN_IN_USE)
    session.attach(feed)
    if args.trace:
        playback = TracePlayback.from_file(feed, args.trace, args.speed)
    else:
        playback = TracePlayback.from_coords(feed, [Coord(args.lat, args.lon)])
    playback.step()

    # 2. Destination and route
    try:
        if args.dest_lat is not None:
            session.set_destination(Coord(args.dest_lat, args.dest_lon))
        else:
            session.navigate_to_address(args.destination)
        while session.state is SessionState.ROUTE_REQUESTED and session.last_error is None:
            session.process_pending()
            time.sleep(0.05)

        if session.state is not SessionState.ROUTE_ACTIVE:
            reason = session.last_error.message if session.last_error else "unknown error"
            print(f"[Main] Could not start navigation: {reason}")
            return 1

        print("\n--- Route ---")
        _print_steps(session)

        # 3. GPS loop, replace with real GPS feed in production
        print("\n--- GPS Loop Active ---")
        while not playback.is_finished():
            time.sleep(playback.poll_interval())
            event = playback.step()
            session.process_pending()
            step = session.current_step
            instruction = step.instruction if step and step.instruction else "(departure)"
            print(f"  GPS {event.coord} → step {session.step_index}: {instruction}")
    finally:
        dispatcher.shutdown()

    print("\n--- Session complete ---")
    return 0


if __name__ == "__main__":
    sys.exit(main())
