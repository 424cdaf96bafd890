from deployment.constants import DEPLOYER
from deployment.tasks import task

MERCHANT_ARGS = [
    "0x1DB6990CFAD265EFE4A0BB986488C04CC49FEE53",
    "0xA3A3F5684FA066D9E5520FD5E592D87C322A58C2",
    # "0x0997AEB2FB2E15E532B972C145E140B278510143",
    # "0x55DC789DC6D58C596214F10D4A7717E9EC0A8CBB",
]


@task(tags=["Merchant"])
def deploy_merchant(env):
    deployer = env.named_accounts()[DEPLOYER]
    return env.deploy("Merchant", sender=deployer, args=MERCHANT_ARGS, log=True)
