"""Encode a prompt with a binary vocabulary and print the resulting tokens."""

import argparse
import logging

import digramtok as dtok

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    datefmt="%H:%M:%S",
)


def main() -> None:
    parser = argparse.ArgumentParser(description="Tokenize a prompt.")
    parser.add_argument("vocab", help="Path to a binary vocabulary file.")
    parser.add_argument("prompt", help="Text to encode.")
    parser.add_argument("--vocab-size", type=int, default=32_000)
    parser.add_argument(
        "--unknown",
        choices=["skip", "raise"],
        default="skip",
        help="What to do with characters missing from the vocabulary.",
    )
    args = parser.parse_args()

    tok = dtok.load_tokenizer(args.vocab, args.vocab_size)
    seq = tok.encode(args.prompt, strategy=dtok.get_strategy(args.unknown))

    print(f"{len(seq)} tokens: {list(seq)}")
    print(" | ".join(seq.pieces()))
    print(seq.decode())


if __name__ == "__main__":
    main()
