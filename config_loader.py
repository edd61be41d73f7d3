# Module for loading and validating configuration
import json
import os
import constants # Import constants

def _apply_env_overrides(config):
    """Overrides config values from environment variables that are set and non-empty."""
    for env_var, (key, cast) in constants.ENV_OVERRIDES.items():
        raw_value = os.environ.get(env_var)
        if not raw_value:
            continue
        try:
            config[key] = cast(raw_value)
        except ValueError as e:
            raise ValueError(f"Environment variable {env_var}={raw_value!r} is not a valid {cast.__name__}") from e
    return config

def load_config(config_path="config.json"):
    """Loads configuration from a JSON file, applies env overrides, validates, and sets defaults."""
    try:
        with open(config_path, 'r', encoding='utf-8') as f:
            config = json.load(f)

        if not isinstance(config, dict):
            raise ValueError(f"Config file '{config_path}' must contain a JSON object.")

        # --- Validation ---
        required_keys = ["review_texts_dir", "archives_dir", "failed_fetches_file"]
        missing_keys = [key for key in required_keys if key not in config]
        if missing_keys:
            raise ValueError(f"Config file '{config_path}' is missing required keys: {', '.join(missing_keys)}")

        # --- Set Defaults for Optional Keys ---
        config['log_file'] = config.get('log_file', constants.DEFAULT_LOG_FILE)
        config['reports_dir'] = config.get('reports_dir', constants.DEFAULT_REPORTS_DIR)
        config['batch_size'] = config.get('batch_size', constants.DEFAULT_BATCH_SIZE)
        config['max_reviews'] = config.get('max_reviews', constants.DEFAULT_MAX_REVIEWS)
        config['show_filter'] = config.get('show_filter', "")
        config['min_word_count'] = config.get('min_word_count', constants.DEFAULT_MIN_WORD_COUNT)
        config['min_delay_ms'] = config.get('min_delay_ms', constants.DEFAULT_MIN_DELAY_MS)
        config['max_delay_ms'] = config.get('max_delay_ms', constants.DEFAULT_MAX_DELAY_MS)
        config['checkpoint_interval'] = config.get('checkpoint_interval', constants.DEFAULT_CHECKPOINT_INTERVAL)

        config['request_timeout_ms'] = config.get('request_timeout_ms', constants.DEFAULT_REQUEST_TIMEOUT_MS)
        config['settle_ms'] = config.get('settle_ms', constants.DEFAULT_SETTLE_MS)
        config['max_retries'] = config.get('max_retries', constants.DEFAULT_MAX_RETRIES)
        config['retry_delay_seconds'] = config.get('retry_delay_seconds', constants.DEFAULT_RETRY_DELAY)

        config['snapshot_year'] = config.get('snapshot_year', constants.DEFAULT_SNAPSHOT_YEAR)
        config['headless'] = config.get('headless', True)
        config['proxy_api_key'] = config.get('proxy_api_key', "")
        config['proxy_api_url'] = config.get('proxy_api_url', constants.PROXY_API_URL)
        config['random_seed'] = config.get('random_seed')

        _apply_env_overrides(config)

        # --- Further Validation ---
        for key in ('batch_size', 'max_reviews', 'max_retries'):
            if not isinstance(config[key], int) or isinstance(config[key], bool) or config[key] < 0:
                raise ValueError(f"Config '{key}' must be a non-negative integer.")
        for key in ('checkpoint_interval', 'min_word_count'):
            if not isinstance(config[key], int) or isinstance(config[key], bool) or config[key] < 1:
                raise ValueError(f"Config '{key}' must be a positive integer.")
        for key in ('min_delay_ms', 'max_delay_ms', 'request_timeout_ms', 'settle_ms', 'retry_delay_seconds'):
            if not isinstance(config[key], (int, float)) or isinstance(config[key], bool) or config[key] < 0:
                raise ValueError(f"Config '{key}' must be a non-negative number.")
        if config['min_delay_ms'] > config['max_delay_ms']:
            raise ValueError("Config 'min_delay_ms' must not exceed 'max_delay_ms'.")

        return config

    except FileNotFoundError:
        raise # Re-raise the FileNotFoundError
    except json.JSONDecodeError as e:
        raise ValueError(f"Error decoding JSON from config file '{config_path}': {e}") from e
    except ValueError:
        raise # Let the ValueError raised during validation propagate
    except Exception as e: # Catch any other unexpected errors during loading/validation
        raise RuntimeError(f"An unexpected error occurred loading configuration from '{config_path}': {e}") from e


def effective_run_limit(config):
    """Returns the worklist cap for a run: the smallest non-zero of batch_size/max_reviews, or 0."""
    limits = [value for value in (config.get('batch_size', 0), config.get('max_reviews', 0)) if value]
    return min(limits) if limits else 0
