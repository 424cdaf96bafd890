from pathlib import Path

import deployment

#
# Filesystem
#

DEPLOYMENT_DIR = Path(deployment.__file__).parent
CONFIG_DIR = DEPLOYMENT_DIR / "config"
ARTIFACTS_DIR = DEPLOYMENT_DIR / "artifacts"
# relative to the working directory; ape runs scripts from the project root
DEPLOY_DIR = Path("deploy")

DEFAULT_CONFIG_FILEPATH = CONFIG_DIR / "merchant.yml"

#
# Networks
#

LOCAL_BLOCKCHAIN_ENVIRONMENTS = ["local"]

#
# Named accounts
#

DEPLOYER = "deployer"
DEFAULT_NETWORK_KEY = "default"

#
# Registry
#

STANDARD_REGISTRY_JSON_FORMAT = {"indent": 4, "separators": (",", ": ")}
