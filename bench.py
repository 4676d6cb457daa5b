"""Benchmark encode() and decode() on a slice of the Sci-Fi Gutenberg dataset.

Outputs a row with the columns:
  Corpus Size | Vocab Size | Load Time | Encoding Throughput |
  Decoding Throughput | Compression Ratio | Unknown Chars
"""

import argparse
import logging
import time

from datasets import load_dataset

from digramtok import SkipStrategy, load_tokenizer

HF_DATASET = "stevez80/Sci-Fi-Books-gutenberg"


def load_corpus(num_docs: int | None) -> list[str]:
    """Load up to `num_docs` documents via dataset indexing; full dataset when None."""
    print(f"Loading {HF_DATASET} (non-streaming) …")
    ds = load_dataset(HF_DATASET, split="train")
    if num_docs is not None:
        return ds[:num_docs]["text"]
    return ds["text"]


def main() -> None:
    """Run the encode/decode benchmark and print a markdown table row."""
    parser = argparse.ArgumentParser(
        description="Benchmark digramtok encode() and decode()."
    )
    parser.add_argument("vocab", type=str, help="Path to a binary vocabulary file.")
    parser.add_argument(
        "--vocab-size",
        type=int,
        default=32_000,
        help="Number of entries in the vocabulary file (default: 32,000).",
    )
    parser.add_argument(
        "--num-docs",
        type=int,
        default=100,
        help="Number of documents to encode (default: 100).",
    )
    args = parser.parse_args()

    logging.basicConfig(level=logging.ERROR)

    t0 = time.perf_counter()
    tokenizer = load_tokenizer(args.vocab, args.vocab_size)
    load_secs = time.perf_counter() - t0

    docs = load_corpus(args.num_docs)
    if not docs:
        raise RuntimeError("No documents loaded from dataset.")

    total_chars = sum(len(d) for d in docs)
    total_bytes = sum(len(d.encode("utf-8")) for d in docs)
    corpus_mb = total_bytes / (1024 * 1024)

    # counts dropped characters; their warnings are below the log level
    strategy = SkipStrategy()

    # --- Encoding ---
    t0 = time.perf_counter()
    encoded = [tokenizer.encode(doc, strategy=strategy) for doc in docs]
    encode_elapsed = time.perf_counter() - t0
    encode_mbps = total_bytes / encode_elapsed / (1024 * 1024)

    # --- Decoding ---
    t0 = time.perf_counter()
    for seq in encoded:
        seq.decode()
    decode_elapsed = time.perf_counter() - t0
    total_tokens = sum(len(seq) for seq in encoded)
    decode_mtps = total_tokens / decode_elapsed / 1_000_000

    # --- Compression stats ---
    compression_ratio = total_chars / max(total_tokens, 1)
    unknown = strategy.skipped

    # --- Output ---
    print()
    header = (
        f"| {'Corpus Size':14} | {'Vocab Size':10} | {'Load Time':10} "
        f"| {'Encoding Throughput':19} | {'Decoding Throughput':19} "
        f"| {'Compression Ratio':17} | {'Unknown Chars':13} |"
    )
    sep = (
        f"| {'-' * 14} | {'-' * 10} | {'-' * 10} "
        f"| {'-' * 19} | {'-' * 19} "
        f"| {'-' * 17} | {'-' * 13} |"
    )
    row = (
        f"| {f'{corpus_mb:.2f} MB':14} | {args.vocab_size:10,} | {f'{load_secs:.2f} secs':10} "
        f"| {f'{encode_mbps:.3f} MB/sec':19} | {f'{decode_mtps:.1f}M tokens/sec':19} "
        f"| {f'{compression_ratio:.2f}x':17} | {unknown:13,} |"
    )
    print(header)
    print(sep)
    print(row)
    print()


if __name__ == "__main__":
    main()
