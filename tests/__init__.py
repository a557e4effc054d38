"""
s3rmdir Test Suite

- test_batching.py - Batch accumulation, prefix normalization, scope guard
- test_aggregator.py - Completion barrier and progress aggregation
- test_s3_utils.py - Listing, delete requests and client construction
- test_purger.py - End-to-end purge runs against a fake S3 client
- test_cli.py - Flags, exit codes and printed output
"""
