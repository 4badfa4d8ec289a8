"""
avgstego Command Line Interface

Usage:
    avgstego embed --carrier IMAGE (--data FILE | --text TEXT) [OPTIONS]
    avgstego extract --carrier IMAGE [--output FILE]
    avgstego capacity --carrier IMAGE
    avgstego --version
    avgstego --help
"""

import sys
import logging
import argparse
from typing import List, Optional

from . import __version__
from .carrier import is_lossy_path, load_image
from .config import StegoConfig
from .errors import StegoError
from .stego import AverageStego


logger = logging.getLogger(__name__)

LOG_FORMAT = '%(asctime)s %(levelname)s %(name)s - %(message)s'


class StegoCLI:
    """Main CLI application for avgstego."""

    def __init__(self, stego: Optional[AverageStego] = None):
        self._stego = stego

    @property
    def stego(self) -> AverageStego:
        if self._stego is None:
            self._stego = AverageStego(StegoConfig.from_env())
        return self._stego

    def run(self, args: List[str]) -> int:
        """Run the CLI with given arguments and return the exit code."""
        parser = self.create_parser()
        parsed = parser.parse_args(args)

        if parsed.verbose:
            logging.getLogger("avgstego").setLevel(logging.DEBUG)

        if not hasattr(parsed, 'func'):
            parser.print_help()
            return 0

        try:
            return parsed.func(parsed)
        except (StegoError, OSError) as e:
            logger.debug("Command failed", exc_info=True)
            print(f"Error: {e}", file=sys.stderr)
            return 1

    def create_parser(self) -> argparse.ArgumentParser:
        """Create the argument parser."""
        parser = argparse.ArgumentParser(
            prog="avgstego",
            description="Hide data in images with neighbor-average steganography",
            formatter_class=argparse.RawDescriptionHelpFormatter,
            epilog="""
Examples:
    avgstego embed --carrier photo.jpg --text "meet at noon" --output out.png
    avgstego embed --carrier photo.png --data secret.bin --verify
    avgstego extract --carrier out.png
    avgstego capacity --carrier photo.png

Stego images must be saved losslessly (PNG, BMP, TIFF).
            """
        )

        parser.add_argument(
            '--version',
            action='version',
            version=f'avgstego v{__version__}'
        )
        parser.add_argument('--verbose', '-v', action='store_true',
                            help='Enable debug logging')

        subparsers = parser.add_subparsers(dest='command', help='Commands')

        embed_cmd = subparsers.add_parser('embed', help='Embed data in a carrier image')
        embed_cmd.add_argument('--carrier', '-c', required=True,
                               help='Carrier image path')
        payload = embed_cmd.add_mutually_exclusive_group(required=True)
        payload.add_argument('--data', '-d', help='File whose bytes are embedded')
        payload.add_argument('--text', '-t', help='Text embedded as UTF-8')
        embed_cmd.add_argument('--output', '-o',
                               help='Output image path (default: <carrier>.stego.png)')
        embed_cmd.add_argument('--seed', type=int,
                               help='Selection seed (default: random)')
        embed_cmd.add_argument('--verify', action='store_true',
                               help='Reload the output and check the payload round trip')
        embed_cmd.set_defaults(func=self.handle_embed)

        extract_cmd = subparsers.add_parser('extract', help='Extract data from a stego image')
        extract_cmd.add_argument('--carrier', '-c', required=True,
                                 help='Stego image path')
        extract_cmd.add_argument('--output', '-o',
                                 help='Write the payload to this file instead of printing it')
        extract_cmd.set_defaults(func=self.handle_extract)

        capacity_cmd = subparsers.add_parser('capacity', help='Show how many bytes an image can hold')
        capacity_cmd.add_argument('--carrier', '-c', required=True,
                                  help='Carrier image path')
        capacity_cmd.set_defaults(func=self.handle_capacity)

        return parser

    # Command handlers

    def handle_embed(self, args) -> int:
        """Handle embed command."""
        if args.data is not None:
            with open(args.data, 'rb') as f:
                data = f.read()
        else:
            data = args.text.encode('utf-8')

        if args.output and is_lossy_path(args.output):
            print(f"Warning: {args.output} is a lossy format; the payload will not survive",
                  file=sys.stderr)

        output_path, result = self.stego.embed_file(
            args.carrier, data, output_path=args.output, seed=args.seed
        )
        print(f"Embedded {result.capacity_used} of {result.capacity_total} bytes -> {output_path}")

        if args.verify:
            extracted = self.stego.extract_file(output_path)
            if extracted.data != data:
                print("Verification failed: extracted payload differs", file=sys.stderr)
                return 1
            print("Verification passed.")
        return 0

    def handle_extract(self, args) -> int:
        """Handle extract command."""
        result = self.stego.extract_file(args.carrier)

        if args.output:
            with open(args.output, 'wb') as f:
                f.write(result.data)
            print(f"Extracted {len(result.data)} bytes -> {args.output}")
            return 0

        try:
            print(result.data.decode('utf-8'))
        except UnicodeDecodeError:
            print(f"Extracted {len(result.data)} bytes of binary data; use --output to save them")
        return 0

    def handle_capacity(self, args) -> int:
        """Handle capacity command."""
        pixels = load_image(args.carrier)
        height, width = pixels.shape[:2]
        print(f"{args.carrier}: {width}x{height}, capacity {self.stego.calculate_capacity(pixels)} bytes")
        return 0


def main():
    """Main entry point."""
    logging.basicConfig(level=logging.WARNING, format=LOG_FORMAT)
    cli = StegoCLI()
    sys.exit(cli.run(sys.argv[1:]))


if __name__ == "__main__":
    main()
