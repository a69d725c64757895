import sys
import logging
import argparse
from datetime import date

from calc.dates import parse_month, week_start_from_name, WEEK_START_NAMES
from render.renderers import SummaryRenderer, CalendarRenderer, GoalsRenderer, RENDERER_REGISTRY
from storage.profiles import load_profile, list_profiles, profiles_root


def build_renderer(args):
    """Create the renderer for the selected mode from the parsed arguments."""
    if args.mode == 'Summary':
        return SummaryRenderer(use_net=args.net)
    if args.mode == 'Calendar':
        year, month = parse_month(args.month) if args.month else (date.today().year, date.today().month)
        return CalendarRenderer(year, month, use_net=args.net,
                                first_weekday=week_start_from_name(args.week_start))
    return GoalsRenderer(max_payments=args.payments)


def main():
    parser = argparse.ArgumentParser(
        description='Income projection and savings planner',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Modes:
  Summary   Print projected monthly income and every income source (default)
  Calendar  Print one month of income events grouped by week
  Goals     Print savings goals with their upcoming planned payments

Examples:
  python src/Program.py myprofile
  python src/Program.py myprofile --mode Calendar --month 2025-03
  python src/Program.py myprofile --mode Calendar --net --week-start monday
  python src/Program.py myprofile --mode Goals --payments 5
  python src/Program.py --list
        """
    )
    parser.add_argument('profile_name', nargs='?', help='Name of the profile (folder in the profiles directory)')
    parser.add_argument('--mode', '-m',
                        choices=list(RENDERER_REGISTRY.keys()),
                        default='Summary',
                        help='Output mode: Summary (default), Calendar or Goals')
    parser.add_argument('--month', help='Month to show in Calendar mode as YYYY-MM (default: current month)')
    parser.add_argument('--net', action='store_true', help='Show net amounts instead of gross')
    parser.add_argument('--week-start', choices=list(WEEK_START_NAMES), default='sunday',
                        help='First day of the week in Calendar mode')
    parser.add_argument('--payments', type=int, default=10, help='Planned payments to list per goal in Goals mode')
    parser.add_argument('--profiles-dir', help='Directory holding profile folders')
    parser.add_argument('--list', '-l', action='store_true', help='List available profiles and exit')
    parser.add_argument('--verbose', '-v', action='store_true', help='Show debug logging')

    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format='%(levelname)s %(name)s: %(message)s',
    )

    if args.list:
        profiles = list_profiles(args.profiles_dir)
        if not profiles:
            print(f"No profiles found in {profiles_root(args.profiles_dir)}")
        for name in profiles:
            print(name)
        sys.exit(0)

    if not args.profile_name:
        parser.error("profile_name is required (or use --list to see available profiles)")

    try:
        profile = load_profile(args.profile_name, args.profiles_dir)
    except FileNotFoundError as e:
        print(e)
        sys.exit(1)

    try:
        renderer = build_renderer(args)
    except ValueError as e:
        parser.error(str(e))

    if args.mode == 'Goals':
        renderer.render(profile.savings)
    else:
        renderer.render(profile.income)


if __name__ == "__main__":
    main()
