# tests/test_reference_torch.py
# Cross-checks against torch.nn.functional on the same inputs.

import unittest

import numpy as np
import torch
import torch.nn.functional as F

from nnlosses import CosineEmbeddingLoss, KLDivergence, cosine_distance


class Test_AgainstTorch(unittest.TestCase):

    def setUp(self):
        rng = np.random.default_rng(42)
        self.a = rng.normal(size=(6, 5))
        self.b = rng.normal(size=(6, 5))

    def test_cosine_distance(self):
        expected = 1.0 - F.cosine_similarity(torch.from_numpy(self.a), torch.from_numpy(self.b), dim=1)
        np.testing.assert_allclose(cosine_distance(self.a, self.b), expected.numpy(), rtol=1e-10)

    def test_similar_pairs_sum_cosine_similarity(self):
        sim = F.cosine_similarity(torch.from_numpy(self.a), torch.from_numpy(self.b), dim=1)
        loss = CosineEmbeddingLoss(similarity=True, reduction=False)
        np.testing.assert_allclose(loss.forward(self.a, self.b), sim.mean().item(), rtol=1e-10)

    def test_kl_divergence(self):
        log_p = torch.log_softmax(torch.from_numpy(self.a), dim=1)
        q = torch.softmax(torch.from_numpy(self.b), dim=1)
        for reduction, torch_reduction in ((True, "sum"), (False, "mean")):
            expected = F.kl_div(log_p, q, reduction=torch_reduction).item()
            got = KLDivergence(reduction=reduction).forward(log_p.numpy(), q.numpy())
            np.testing.assert_allclose(got, expected, rtol=1e-10)


if __name__ == '__main__':
    unittest.main()
