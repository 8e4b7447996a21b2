from pyPipeSimLib.predictor.base           import BranchPredictor
from pyPipeSimLib.predictor.saturating     import SaturatingBranchPredictor
from pyPipeSimLib.predictor.bhr            import BHRBranchPredictor
from pyPipeSimLib.predictor.saturating_bhr import SaturatingBHRBranchPredictor

PREDICTORS = {
  'saturating'    : SaturatingBranchPredictor,
  'bhr'           : BHRBranchPredictor,
  'saturating-bhr': SaturatingBHRBranchPredictor,
}
